# This file defines response models for the administrator `/instance` routes.

from __future__ import annotations

from pydantic import BaseModel


class InstanceInfoResponseV1(BaseModel):
    name: str
    hostname: str
