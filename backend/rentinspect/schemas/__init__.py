"""Pydantic schemas for the RentInspect API."""

from rentinspect.schemas.property import *
from rentinspect.schemas.inspection import *
from rentinspect.schemas.report import *
