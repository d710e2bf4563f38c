"""OpenTelemetry 계측 설정

클라이언트 측 오케스트레이터와 ARQ Worker에서 공통으로 사용하는
OTel 초기화 로직을 제공합니다.
"""

from __future__ import annotations

import asyncio
import logging
import os
from functools import wraps
from typing import Any, Callable, TypeVar

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.semconv.resource import ResourceAttributes

logger = logging.getLogger(__name__)

T = TypeVar("T")


def init_telemetry(
    service_name: str,
    service_version: str = "0.1.0",
    otlp_endpoint: str | None = None,
) -> tuple[trace.Tracer, metrics.Meter]:
    """OpenTelemetry 초기화

    Args:
        service_name: 서비스 이름 (예: "vrsa-discussion", "vrsa-arq-worker")
        service_version: 서비스 버전
        otlp_endpoint: OTLP 수신 엔드포인트 (기본값: OTEL_EXPORTER_OTLP_ENDPOINT 환경변수)

    Returns:
        (Tracer, Meter) 튜플
    """
    endpoint = otlp_endpoint or os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4317")

    resource = Resource.create(
        {
            ResourceAttributes.SERVICE_NAME: service_name,
            ResourceAttributes.SERVICE_VERSION: service_version,
            ResourceAttributes.DEPLOYMENT_ENVIRONMENT: os.getenv("APP_ENV", "development"),
        }
    )

    # Trace는 로컬 provider만 설정 (exporter 미연결)
    tracer_provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(tracer_provider)

    metric_reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=endpoint, insecure=True),
        export_interval_millis=10000,  # 10초마다 export
    )
    meter_provider = MeterProvider(resource=resource, metric_readers=[metric_reader])
    metrics.set_meter_provider(meter_provider)

    tracer = trace.get_tracer(service_name, service_version)
    meter = metrics.get_meter(service_name, service_version)

    logger.info(
        "Telemetry initialized: service=%s, endpoint=%s",
        service_name,
        endpoint,
    )

    return tracer, meter


# ===========================================
# 토론 엔진 전용 메트릭
# ===========================================


class DiscussionMetrics:
    """봇 응답/워커 커스텀 메트릭"""

    def __init__(self, meter: metrics.Meter):
        self.meter = meter
        self._init_bot_reply_metrics()
        self._init_arq_metrics()

    def _init_bot_reply_metrics(self) -> None:
        """봇 자동 응답 메트릭"""
        self.bot_reply_jobs_total = self.meter.create_counter(
            name="vrsa_bot_reply_jobs_total",
            description="봇 응답 작업 종료 수 (done/failed)",
        )
        self.bot_reply_duration = self.meter.create_histogram(
            name="vrsa_bot_reply_duration_seconds",
            description="봇 응답 작업 소요 시간 (예약 → 종료)",
            unit="s",
        )

    def _init_arq_metrics(self) -> None:
        """ARQ 태스크 메트릭"""
        self.arq_task_enqueue_total = self.meter.create_counter(
            name="vrsa_arq_task_enqueue_total",
            description="ARQ 태스크 enqueue 수",
        )
        self.arq_task_duration = self.meter.create_histogram(
            name="vrsa_arq_task_duration_seconds",
            description="ARQ 태스크 실행 시간",
            unit="s",
        )
        self.arq_task_result = self.meter.create_counter(
            name="vrsa_arq_task_result_total",
            description="ARQ 태스크 결과 (success/failed)",
        )


# ===========================================
# 싱글톤 인스턴스 및 접근자
# ===========================================

_tracer: trace.Tracer | None = None
_meter: metrics.Meter | None = None
_metrics: DiscussionMetrics | None = None
_initialized: bool = False


def is_telemetry_initialized() -> bool:
    """Telemetry 초기화 여부 확인"""
    return _initialized


def get_tracer() -> trace.Tracer:
    """Tracer 인스턴스 반환 (초기화 안 된 경우 noop tracer 반환)"""
    if _tracer is None:
        return trace.get_tracer("vrsa-noop")
    return _tracer


def get_discussion_metrics() -> DiscussionMetrics | None:
    """메트릭 인스턴스 반환 (초기화 안 된 경우 None)"""
    return _metrics


def setup_telemetry(service_name: str, service_version: str = "0.1.0") -> None:
    """전역 telemetry 설정 (프로세스 시작 시 호출)"""
    global _tracer, _meter, _metrics, _initialized

    if _initialized:
        logger.warning("Telemetry already initialized, skipping")
        return

    _tracer, _meter = init_telemetry(service_name, service_version)
    _metrics = DiscussionMetrics(_meter)
    _initialized = True


def traced_function(
    span_name: str | None = None,
    attributes: dict[str, Any] | None = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """함수를 OTel span으로 래핑하는 데코레이터

    Usage:
        @traced_function("bot_reply.generate")
        async def my_func():
            ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        name = span_name or func.__name__

        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> T:
            tracer = get_tracer()
            with tracer.start_as_current_span(name) as span:
                if attributes:
                    for key, value in attributes.items():
                        span.set_attribute(key, value)
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    span.record_exception(e)
                    span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                    raise

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> T:
            tracer = get_tracer()
            with tracer.start_as_current_span(name) as span:
                if attributes:
                    for key, value in attributes.items():
                        span.set_attribute(key, value)
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    span.record_exception(e)
                    span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                    raise

        if asyncio.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator
