"""Almacén global de analíticas en memoria.

No hay base de datos, así que exponemos una instancia única de
`AnalyticsService` que vive mientras el proceso está en marcha. Esto
simplifica el uso en los routers sin requerir inyección de dependencias.
"""

from app.services.analytics_service import AnalyticsService

# Instancia global única para toda la app (MVP en memoria)
analytics_store = AnalyticsService()
