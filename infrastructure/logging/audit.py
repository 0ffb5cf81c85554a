import json
import logging
import os
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from smartolive.domain.recommendation import Recommendation


class AuditLogger:
    """Append-only JSON trail of irrigation decisions."""

    def __init__(self, log_path: str, level: str = "INFO") -> None:
        self.log_path = Path(log_path)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

        # One logger per file so separate trails never share records
        self._target = os.path.abspath(self.log_path)
        self.logger = logging.getLogger(f"smartolive.audit.{self._target}")
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self.logger.propagate = False

        if not self._file_handlers():
            handler = RotatingFileHandler(
                filename=str(self.log_path),
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=30,
                encoding="utf-8",
                delay=True,
            )
            formatter = logging.Formatter(
                fmt="%(asctime)sZ | %(levelname)s | %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
            formatter.converter = time.gmtime
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_event(self, actor: str, action: str, resource: str, outcome: str, **metadata: Any) -> None:
        payload: Dict[str, Any] = {
            "actor": actor,
            "action": action,
            "resource": resource,
            "outcome": outcome,
        }
        if metadata:
            payload["meta"] = metadata

        self.logger.info(json.dumps(payload, default=str))

    def log_recommendation(self, parcel_id: str, recommendation: "Recommendation") -> None:
        """Record one issued recommendation with its full reasoning."""
        outcome = "irrigate" if recommendation.should_irrigate else "skip"
        self.log_event(
            actor="engine",
            action="recommend",
            resource=f"parcel:{parcel_id}",
            outcome=outcome,
            level=recommendation.level.value,
            liters=recommendation.liters,
            reasons=list(recommendation.reasons),
            created_at=recommendation.created_at.isoformat(),
        )

    def _file_handlers(self) -> list:
        return [
            handler
            for handler in self.logger.handlers
            if isinstance(handler, RotatingFileHandler) and handler.baseFilename == self._target
        ]

    def close(self) -> None:
        for handler in self._file_handlers():
            handler.close()
            self.logger.removeHandler(handler)
