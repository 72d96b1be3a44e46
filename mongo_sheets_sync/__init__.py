"""
Pipeline de exportación one-way: MongoDB -> Google Sheets.

Este paquete está diseñado para ejecutarse como job (cron / task scheduler).

Objetivos de diseño:
- Idempotencia: se puede ejecutar N veces sin duplicar filas (dedup por _id).
- Incremental: se apoya en el timestamp que codifica el ObjectId.
- Header único que solo crece: las columnas nuevas se agregan al final.
"""

__version__ = "1.0.0"
