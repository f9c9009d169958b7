"""
请求步骤监控
为报告生成流程的每个阶段记录结果、耗时和 request_id
"""
import logging
import time
import uuid
from typing import Any, Dict, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

monitor_logger = logging.getLogger("monitor")
monitor_logger.setLevel(logging.INFO)


def attach_monitor_file(path: str):
    """Also write step logs to ``path`` (in addition to the root handlers)."""
    for handler in monitor_logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == path:
            return
    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    monitor_logger.addHandler(file_handler)


def new_request_id() -> str:
    return str(uuid.uuid4())[:8]


def _format(step_name: str, status: str, request_id: str, elapsed: Optional[float] = None,
            extra_data: Optional[Dict[str, Any]] = None, error: Optional[str] = None) -> str:
    parts = [f"step: {step_name}", f"status: {status}"]
    if elapsed is not None:
        parts.append(f"elapsed: {elapsed:.3f}s")
    parts.append(f"request_id: {request_id}")
    if extra_data:
        parts.append("extra: " + ", ".join(f"{k}={v}" for k, v in extra_data.items()))
    if error:
        parts.append(f"error: {error}")
    return " | ".join(parts)


class StepMonitor:
    """
    步骤监控上下文管理器

    进入时记录开始时间，退出时按成功/失败记录日志，异常照常向上传播。

    示例:
        with StepMonitor("generate", request_id="abc123", extra_data={"model": "gpt-4.1-mini"}):
            html = await client.generate(prompt)
    """

    def __init__(self, step_name: str, request_id: Optional[str] = None,
                 extra_data: Optional[Dict[str, Any]] = None):
        self.step_name = step_name
        self.request_id = request_id or new_request_id()
        self.extra_data = extra_data or {}
        self.start_time = None
        self.exception = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is None:
            return False
        elapsed = time.perf_counter() - self.start_time

        if exc_type is None:
            monitor_logger.info(_format(self.step_name, "ok", self.request_id, elapsed, self.extra_data))
        else:
            self.exception = f"{exc_type.__name__}: {exc_val}" if exc_val else exc_type.__name__
            monitor_logger.error(
                _format(self.step_name, "failed", self.request_id, elapsed, self.extra_data, self.exception)
            )
        return False


def log_step(step_name: str, request_id: Optional[str] = None,
             extra_data: Optional[Dict[str, Any]] = None, status: str = "ok"):
    """手动记录一次监控日志，用于流程收尾等节点。"""
    message = _format(step_name, status, request_id or new_request_id(), extra_data=extra_data)
    if status == "ok":
        monitor_logger.info(message)
    else:
        monitor_logger.error(message)
