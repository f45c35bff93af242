import datetime
from typing import Any

import jinja2


def jinja_args(**kwargs) -> dict[str, Any]:
    now = datetime.datetime.now(datetime.timezone.utc)
    out = dict(
        datetime_iso8601=now.strftime("%Y-%m-%dT%H:%M:%SZ"),
        datetime_day=now.strftime("%Y-%m-%d"),
    )
    out.update(kwargs)
    return out


def kotlin_string(value: str) -> str:
    """Escape a value for use inside a Kotlin "..." string literal."""
    return (
        str(value)
        .replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("$", "\\$")
        .replace("\n", "\\n")
    )


def jinja_env() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.PackageLoader("pkg_mirror", "templates"),
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    env.filters["kotlin_string"] = kotlin_string
    return env


def render_template(name: str, **kwargs) -> str:
    return jinja_env().get_template(name).render(jinja_args(**kwargs))
