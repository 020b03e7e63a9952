import time
from datetime import datetime
from typing import Any, Dict

from .database import Database


class HealthChecker:
    def __init__(self, service_name: str):
        self.service_name = service_name
        self.start_time = datetime.utcnow()

    def check_database(self, database: Database) -> Dict[str, Any]:
        """Check database connectivity and response time"""
        start_time = time.time()
        try:
            database.ping()
            response_time = (time.time() - start_time) * 1000
            return {
                "status": "healthy",
                "response_time_ms": round(response_time, 2),
                "connection": "active",
            }
        except Exception as e:
            response_time = (time.time() - start_time) * 1000
            return {
                "status": "unhealthy",
                "response_time_ms": round(response_time, 2),
                "connection": "failed",
                "error": str(e),
            }

    def get_system_info(self) -> Dict[str, Any]:
        uptime_seconds = (datetime.utcnow() - self.start_time).total_seconds()
        return {
            "service_name": self.service_name,
            "start_time": self.start_time.isoformat(),
            "uptime_seconds": round(uptime_seconds, 2),
        }

    def report(self, database: Database) -> Dict[str, Any]:
        db_health = self.check_database(database)
        return {
            "status": db_health["status"],
            "service": self.service_name,
            "database": db_health,
            "circuit_breakers": {"database": database.breaker.get_stats()},
            "system": self.get_system_info(),
        }
