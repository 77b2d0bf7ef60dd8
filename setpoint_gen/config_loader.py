import configparser
import json
import re
from pathlib import Path

from .generator import ConfigError, SetPointConfig

SECTION = "setpoint"

KEY_STATIONARY = "STATIONARY_SETPOINT"
KEY_MAX_CHANGE_RATE = "MAX_CHANGE_RATE_PER_STEP_SETPOINT"
KEY_MAX_SEQUENCE_LENGTH = "MAX_SEQUENCE_LENGTH"
KEY_MIN = "SetPoint_MIN"
KEY_MAX = "SetPoint_MAX"
KEY_STEP_SIZE = "SETPOINT_STEP_SIZE"


def _get_float(props: dict, key: str) -> float:
    if key not in props:
        raise ConfigError(f"missing required property {key}")
    raw = props[key]
    if isinstance(raw, bool):
        raise ConfigError(f"property {key} must be a number, got {raw!r}")
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"property {key} must be a number, got {raw!r}") from exc


def _get_int(props: dict, key: str) -> int:
    if key not in props:
        raise ConfigError(f"missing required property {key}")
    raw = props[key]
    if isinstance(raw, bool) or isinstance(raw, float):
        raise ConfigError(f"property {key} must be an integer, got {raw!r}")
    try:
        return int(str(raw).strip())
    except ValueError as exc:
        raise ConfigError(f"property {key} must be an integer, got {raw!r}") from exc


def config_from_properties(props: dict) -> SetPointConfig:
    """Build a validated :class:`SetPointConfig` from raw property values.

    The presence of ``STATIONARY_SETPOINT`` makes the setpoint stationary.
    Unknown keys are ignored so that the full simulation property file of the
    benchmark can be passed as is.
    """
    stationary = KEY_STATIONARY in props
    config = SetPointConfig(
        max_change_rate_per_step=_get_float(props, KEY_MAX_CHANGE_RATE),
        max_sequence_length=_get_int(props, KEY_MAX_SEQUENCE_LENGTH),
        min_setpoint=_get_float(props, KEY_MIN),
        max_setpoint=_get_float(props, KEY_MAX),
        step_size=_get_float(props, KEY_STEP_SIZE),
        stationary=stationary,
        stationary_value=_get_float(props, KEY_STATIONARY) if stationary else None,
    )
    return config.validate()


_PROPERTY_LINE = re.compile(r"([^=:\s]+)\s*[=:]?\s*(.*)")


def _logical_lines(text: str):
    """Yield the lines of a ``.properties`` file with continuations joined."""
    pending = ""
    for raw in text.splitlines():
        line = raw.lstrip() if pending else raw
        if not pending and line.lstrip().startswith(("#", "!")):
            yield line
            continue
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending += line[:-1]
            continue
        yield pending + line
        pending = ""
    if pending:
        yield pending


def properties_to_ini(text: str) -> str:
    """Rewrite a Java ``.properties`` document as a ``[setpoint]`` INI section.

    Keys may be separated from their values by ``=``, ``:`` or whitespace and
    values may span several lines ending with ``\\``.  Repeated keys are kept
    so that the parser can let the last one win.
    """
    lines = [f"[{SECTION}]"]
    for line in _logical_lines(text):
        stripped = line.strip()
        if not stripped or stripped.startswith(("#", "!")):
            continue
        match = _PROPERTY_LINE.fullmatch(stripped)
        if match is None:
            continue
        lines.append(f"{match.group(1)} = {match.group(2)}")
    return "\n".join(lines) + "\n"


def read_properties(path: str | Path) -> dict:
    """Return the raw key/value pairs of a configuration file.

    ``path`` may point to a JSON document with a flat object, an INI file
    with a ``[setpoint]`` section, or a Java style ``.properties`` file
    without sections.  Keys keep their case and the last occurrence of a
    repeated key wins.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"configuration file not found: {path}")
    text = path.read_text()

    if path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"invalid JSON in {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a JSON object")
        return data.get(SECTION, data)

    cp = configparser.ConfigParser(
        delimiters=("=", ":"),
        comment_prefixes=("#", "!", ";"),
        interpolation=None,
        strict=False,
    )
    cp.optionxform = str  # property names are case sensitive
    try:
        try:
            cp.read_string(text, source=str(path))
        except configparser.MissingSectionHeaderError:
            cp.read_string(properties_to_ini(text), source=str(path))
    except configparser.Error as exc:
        raise ConfigError(f"cannot parse {path}: {exc}") from exc

    if cp.has_section(SECTION):
        return dict(cp.items(SECTION))
    return dict(cp.defaults())


def load_config(path: str | Path) -> SetPointConfig:
    """Load and validate the setpoint configuration stored at ``path``."""
    return config_from_properties(read_properties(path))


def write_properties(config: SetPointConfig, path: str | Path) -> None:
    """Write ``config`` to a ``.properties`` file readable by :func:`load_config`."""
    lines = [
        f"{KEY_MAX_CHANGE_RATE} = {config.max_change_rate_per_step!r}",
        f"{KEY_MAX_SEQUENCE_LENGTH} = {config.max_sequence_length}",
        f"{KEY_MIN} = {config.min_setpoint!r}",
        f"{KEY_MAX} = {config.max_setpoint!r}",
        f"{KEY_STEP_SIZE} = {config.step_size!r}",
    ]
    if config.stationary:
        lines.append(f"{KEY_STATIONARY} = {config.stationary_value!r}")
    Path(path).write_text("\n".join(lines) + "\n")
