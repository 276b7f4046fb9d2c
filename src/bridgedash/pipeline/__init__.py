from bridgedash.pipeline.service import BridgeDataService, DashboardSnapshot

__all__ = ["BridgeDataService", "DashboardSnapshot"]
