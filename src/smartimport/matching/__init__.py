"""Classification des cibles et mapping des champs."""

from smartimport.matching.mapper import map_fields
from smartimport.matching.schema import CategoryScore, FieldMap, FieldScore
from smartimport.matching.scorers import classify, score_target

__all__ = ["CategoryScore", "FieldMap", "FieldScore", "classify", "map_fields", "score_target"]
