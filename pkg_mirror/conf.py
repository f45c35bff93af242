import os
from typing import Any, Dict

import jsonschema
from ruamel.yaml import YAML

from .gradle.mirror import MirrorTable
from .shared import GradleMirror

CONFIG_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "definitions": {
        "url": {
            "type": "string",
            "minLength": 8,
            "maxLength": 4000,
            "pattern": r'^https?://[^\s"\\]+$',
        },
        "optionalUrl": {
            "anyOf": [{"$ref": "#/definitions/url"}, {"const": ""}],
        },
        "gradle": {
            "type": "object",
            "properties": {
                "maven": {"$ref": "#/definitions/optionalUrl"},
                "android": {"$ref": "#/definitions/optionalUrl"},
                "plugins": {"$ref": "#/definitions/optionalUrl"},
            },
            "additionalProperties": False,
        },
        "maven": {
            "type": "object",
            "properties": {
                "id": {"type": "string", "minLength": 1, "maxLength": 200},
                "name": {"type": "string", "maxLength": 200},
                "mirrorOf": {"type": "string", "minLength": 1, "maxLength": 200},
                "url": {"$ref": "#/definitions/url"},
            },
            "required": ["id", "url"],
            "additionalProperties": False,
        },
        "cargo": {
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "pattern": r"^[A-Za-z0-9_-]+$",
                    "maxLength": 200,
                },
                "url": {
                    "type": "string",
                    "maxLength": 4000,
                    "pattern": r'^(sparse\+)?https?://[^\s"\\]+$',
                },
            },
            "required": ["name", "url"],
            "additionalProperties": False,
        },
        "urlOnly": {
            "type": "object",
            "properties": {"url": {"$ref": "#/definitions/url"}},
            "required": ["url"],
            "additionalProperties": False,
        },
    },
    "type": "object",
    "properties": {
        "gradle": {"$ref": "#/definitions/gradle"},
        "maven": {"$ref": "#/definitions/maven"},
        "pip": {"$ref": "#/definitions/urlOnly"},
        "npm": {"$ref": "#/definitions/urlOnly"},
        "docker": {"$ref": "#/definitions/urlOnly"},
        "cargo": {"$ref": "#/definitions/cargo"},
    },
    "required": [],
    "additionalProperties": False,
}

# Used for any manager not mentioned in the config file.
DEFAULT_MIRRORS: Dict[str, Dict[str, Any]] = {
    "gradle": {
        "maven": "https://maven.aliyun.com/repository/central",
        "android": "https://maven.aliyun.com/repository/google",
        "plugins": "https://maven.aliyun.com/repository/gradle-plugin",
    },
    "maven": {
        "id": "aliyun",
        "name": "aliyun maven",
        "mirrorOf": "central",
        "url": "https://maven.aliyun.com/repository/public",
    },
    "pip": {"url": "https://mirrors.aliyun.com/pypi/simple/"},
    "npm": {"url": "https://registry.npmmirror.com"},
    "docker": {"url": "https://docker.m.daocloud.io"},
    "cargo": {"name": "rsproxy-sparse", "url": "sparse+https://rsproxy.cn/index/"},
}


class Config:
    def __init__(self, raw):
        self._raw = raw or {}

    def mirror_value(self, name: str) -> Dict[str, Any]:
        return self._raw.get(name) or DEFAULT_MIRRORS[name]

    @property
    def gradle(self) -> GradleMirror:
        return GradleMirror(**self.mirror_value("gradle"))

    def validate(self) -> None:
        jsonschema.validate(self._raw, CONFIG_SCHEMA)

        try:
            MirrorTable.from_mirror(self.gradle)
        except ValueError as exc:
            raise jsonschema.ValidationError(
                message=str(exc),
                path=["gradle"],
                instance=self._raw.get("gradle"),
                cause=exc,
            )

    @classmethod
    def from_file(cls, filename=".pkg-mirror.yaml", missing_ok=False) -> "Config":
        if missing_ok and not os.path.exists(filename):
            return cls({})
        with open(filename, "rt") as f:
            raw = YAML(typ="safe").load(f)
        return cls(raw)
