"""
Integración con Notion para el CompX Fairness Indicator.

Este paquete corre dentro del poller del API (asyncio), no como job externo.

Objetivos de diseño:
- Idempotencia: el Fairness Indicator vacío marca las filas pendientes.
- Un cliente HTTP por credencial, reutilizado entre ciclos.
- Mapeo explícito de propiedades Notion a tipos Python.
"""
