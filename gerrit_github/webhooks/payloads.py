"""
Typed views of GitHub webhook payloads.

Each model only declares the fields a handler reads.  GitHub sends much
more than that, and everything undeclared is ignored.
"""

from __future__ import annotations

from typing import Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field


class DecodeError(Exception):
    """A request body couldn't be turned into a payload."""


class PayloadMalformed(DecodeError):
    """The body isn't JSON, or doesn't fit the payload's shape."""


class Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class PingPayload(Payload):
    """
    Sent by GitHub when a webhook is created, to check the configuration.

    .. _Ping event: https://docs.github.com/en/webhooks/webhook-events-and-payloads#ping
    """
    zen: str = ""
    hook_id: int = 0


class Owner(Payload):
    login: str = ""


class Repository(Payload):
    name: str = ""
    full_name: str = ""
    owner: Owner = Field(default_factory=Owner)


class PullRequestPayload(Payload):
    """
    .. _Pull request event:
        https://docs.github.com/en/webhooks/webhook-events-and-payloads#pull_request
    """
    action: str = ""
    number: int = 0
    repository: Repository = Field(default_factory=Repository)


P = TypeVar("P", bound=Payload)


def decode_payload(body: bytes, shape: Type[P]) -> P:
    """
    Parse a raw request body into `shape`.

    Raises:
        PayloadMalformed: if the body isn't a JSON object matching `shape`.
    """
    try:
        return shape.model_validate_json(body)
    except ValueError as exc:
        # pydantic.ValidationError is a ValueError.
        raise PayloadMalformed(f"Can't decode {shape.__name__}") from exc
