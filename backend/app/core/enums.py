"""Enumeraciones compartidas que describen niveles de riesgo y plataformas."""

from enum import Enum


class RiskTier(str, Enum):
    """Tramo grueso de riesgo usado para escoger plantillas."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_score(cls, score: float) -> "RiskTier":
        if score >= 70:
            return cls.HIGH
        if score >= 40:
            return cls.MEDIUM
        return cls.LOW


class CookedLevel(str, Enum):
    """Etiqueta de marketing derivada del riesgo de automatización."""

    BURNT = "BURNT"
    WELL_DONE = "WELL-DONE"
    SIMMERING = "SIMMERING"
    MEDIUM_RARE = "MEDIUM RARE"
    RAW = "RAW"

    @classmethod
    def from_score(cls, score: float) -> "CookedLevel":
        if score >= 90:
            return cls.BURNT
        if score >= 75:
            return cls.WELL_DONE
        if score >= 50:
            return cls.SIMMERING
        if score >= 25:
            return cls.MEDIUM_RARE
        return cls.RAW


class ReplacementStatus(str, Enum):
    """Grado en que la IA ya está sustituyendo el puesto (`aiReplacements`)."""

    EVERYWHERE = "EVERYWHERE"
    ACTIVE = "ACTIVE"
    EMERGING = "EMERGING"
    PARTIAL = "PARTIAL"
    LIMITED = "LIMITED"
    MINIMAL = "MINIMAL"
    QUANTUM = "QUANTUM"  # sólo para los puestos "degen"

    @classmethod
    def from_risk(cls, risk: float) -> "ReplacementStatus":
        if risk >= 80:
            return cls.ACTIVE
        if risk >= 60:
            return cls.EMERGING
        if risk >= 40:
            return cls.LIMITED
        return cls.MINIMAL


class AnalysisSource(str, Enum):
    """De dónde sale el perfil de riesgo devuelto al cliente."""

    DATABASE = "database"
    HEURISTIC = "heuristic"
    BLENDED = "blended"


class SharePlatform(str, Enum):
    """Plataformas con contador propio en las analíticas."""

    TWITTER = "twitter"
    TIKTOK = "tiktok"
    LINKEDIN = "linkedin"
    CLIPBOARD = "clipboard"


class MemePlatform(str, Enum):
    """Plataformas para las que hay plantillas de memes."""

    TWITTER = "twitter"
    TIKTOK = "tiktok"
    LINKEDIN = "linkedin"
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"


class Mood(str, Enum):
    HAPPY = "happy"
    SAD = "sad"
    ANGRY = "angry"
    NEUTRAL = "neutral"
    EXCITED = "excited"
    WORRIED = "worried"
