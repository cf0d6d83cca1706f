"""Bus booking back-office API: cities, routes, trips and fares for admins and agents."""

__version__ = "1.0.0"
