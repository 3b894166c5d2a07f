"""ADS-B relay - reenvío de mensajes SBS (BaseStation) a MQTT o Kafka.

Estructura:
- common/   → Configuración y excepciones
- core/     → Dominio, decodificación, pipeline y fuentes de líneas
- sinks/    → Adaptadores de publicación (MQTT, Kafka)
- cli.py    → Punto de entrada del proceso
"""

__version__ = "0.1.0"
