"""
Logging setup - prefixed, per-component log lines

Text format:  [<prefix>:<component>] <timestamp> <level>: <message>
JSON format:  one object per line with the same fields
"""

import logging
import sys

import structlog

ROOT_LOGGER = "yesod"
DEFAULT_COMPONENT = "root"


class ComponentFormatter(logging.Formatter):
    """[prefix:component] timestamp level: message"""

    def __init__(self, prefix: str):
        super().__init__()
        self.prefix = prefix

    def format(self, record: logging.LogRecord) -> str:
        component = getattr(record, "component", DEFAULT_COMPONENT)
        line = (
            f"[{self.prefix}:{component}] {self.formatTime(record)} "
            f"{record.levelname.lower()}: {record.getMessage()}"
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _add_component(prefix: str):
    def processor(logger, method_name, event_dict):
        record = event_dict.get("_record")
        event_dict["prefix"] = prefix
        event_dict["component"] = getattr(record, "component", DEFAULT_COMPONENT)
        return event_dict

    return processor


def json_formatter(prefix: str) -> structlog.stdlib.ProcessorFormatter:
    """One JSON object per record, rendered by structlog"""
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            _add_component(prefix),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.EventRenamer("message"),
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
    )


class ComponentLogger(logging.LoggerAdapter):
    """LoggerAdapter that stamps every record with a component name"""

    def process(self, msg, kwargs):
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("component", self.extra["component"])
        kwargs["extra"] = extra
        return msg, kwargs

    def child(self, component: str) -> "ComponentLogger":
        return ComponentLogger(self.logger, {"component": component})


def configure_logging(prefix: str, level: str = "INFO", fmt: str = "text", stream=None) -> logging.Logger:
    """Install a single handler on the `yesod` logger"""
    root = logging.getLogger(ROOT_LOGGER)
    for handler in list(root.handlers):
        if getattr(handler, "_yesod_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(json_formatter(prefix) if fmt == "json" else ComponentFormatter(prefix))
    handler._yesod_handler = True
    root.addHandler(handler)
    root.setLevel(level.upper())
    return root


def get_logger(prefix: str, component: str | None = None) -> ComponentLogger:
    """Logger for one host instance, e.g. get_logger("banana", "deploy")"""
    return ComponentLogger(
        logging.getLogger(f"{ROOT_LOGGER}.{prefix}"),
        {"component": component or DEFAULT_COMPONENT},
    )
