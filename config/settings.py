from dataclasses import dataclass, field
from typing import Optional, Tuple
import os
from dotenv import load_dotenv

# Load environment variables at module import
load_dotenv()

TEXT_EXTENSIONS: Tuple[str, ...] = ("txt", "md", "template")
STRUCTURED_EXTENSIONS: Tuple[str, ...] = ("yaml", "yml")
SUPPORTED_FORMATS: Tuple[str, ...] = ("json", "yaml")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() not in ("0", "false", "no", "off")


@dataclass
class PathConfig:
    prompts_dir: str = "./prompts"


@dataclass
class CompilerConfig:
    template_extension: str = "template"
    format_output: bool = True
    # Reserved for locale-specific template lookup; nothing reads it yet
    default_locale: str = "default"


@dataclass
class LoggingConfig:
    level: str = "INFO"
    log_dir: Optional[str] = None


@dataclass
class AppConfig:
    paths: PathConfig = field(default_factory=PathConfig)
    compiler: CompilerConfig = field(default_factory=CompilerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        self._load_env_vars()
    
    def _load_env_vars(self):
        self.paths.prompts_dir = os.getenv("PROMPTS_DIR", self.paths.prompts_dir)
        self.compiler.template_extension = os.getenv(
            "PROMPT_TEMPLATE_EXTENSION", self.compiler.template_extension
        ).lstrip(".")
        self.compiler.format_output = _env_flag("PROMPT_FORMAT_OUTPUT", self.compiler.format_output)
        self.compiler.default_locale = os.getenv("PROMPT_LOCALE", self.compiler.default_locale)
        self.logging.level = os.getenv("LOG_LEVEL", self.logging.level).upper()
        self.logging.log_dir = os.getenv("LOG_DIR", self.logging.log_dir)

config = AppConfig()
