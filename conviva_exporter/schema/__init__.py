from conviva_exporter.schema.base import ApiGeneration, RawTable
from conviva_exporter.schema.factory import create_generation

__all__ = ["ApiGeneration", "RawTable", "create_generation"]
