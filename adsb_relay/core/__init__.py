"""Core module - pipeline de decodificación y despacho.

Estructura:
- domain/      → Record, Rejected y contrato de sinks
- validation/  → Decodificador de líneas SBS
- pipeline/    → Driver lectura → decodificación → publicación
- transport/   → Fuentes de líneas (TCP, archivo)
- monitoring/  → Estadísticas
"""
