from kafka import KafkaProducer
from kafka.errors import KafkaError
import json
import structlog
from storefront.core.config import settings

logger = structlog.get_logger(__name__)

_producer = None

def get_producer():
    global _producer
    if _producer is None:
        _producer = KafkaProducer(
            bootstrap_servers=[settings.KAFKA_BOOTSTRAP],
            value_serializer=lambda v: json.dumps(v, default=str).encode("utf-8"),
            key_serializer=lambda v: (v.encode("utf-8") if isinstance(v, str) else v),
            linger_ms=5,
            retries=3,
        )
    return _producer

def send(topic: str, key: str, value: dict) -> bool:
    """Publish one event; delivery is best effort and never fails the caller."""
    if not settings.KAFKA_ENABLED:
        logger.debug("event_skipped", topic=topic, key=key, type=value.get("type"))
        return False
    try:
        p = get_producer()
        p.send(topic, key=key, value=value)
        p.flush(5)
    except KafkaError as e:
        logger.warning("event_publish_failed", topic=topic, key=key, error=str(e))
        return False
    return True
