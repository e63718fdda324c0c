# =============================================================================
# core/models/assessment.py - Clinical Assessment Schema
# =============================================================================
# The structured output the model must produce for one video check-in:
# - mood_score: 1 (severely depressed) .. 5 (euthymic) .. 10 (manic)
# - risk_flags: three boolean indicators
# - biomarkers: three categorical behavioral signals
# - clinical_summary: short free-text abstract
# - mse: optional full Mental Status Examination
#
# Validation is strict (see core/services/response_validator.py): nothing is
# coerced and nothing required is defaulted.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field, field_validator

# Mood scores below this value raise the aggregate risk flag on their own
LOW_MOOD_THRESHOLD = 3


# =============================================================================
# Biomarker Enums
# =============================================================================

class SpeechLatency(str, Enum):
    NORMAL = "normal"
    HIGH = "high"
    LOW = "low"


class AffectType(str, Enum):
    FULL_RANGE = "full_range"
    FLAT = "flat"
    BLUNTED = "blunted"
    LABILE = "labile"


class EyeContact(str, Enum):
    NORMAL = "normal"
    AVOIDANT = "avoidant"


# =============================================================================
# Core Assessment Blocks
# =============================================================================

class RiskFlags(BaseModel):
    """Boolean clinical risk indicators."""
    suicidality_indicated: bool
    self_harm_indicated: bool
    severe_distress: bool

    def any(self) -> bool:
        return self.suicidality_indicated or self.self_harm_indicated or self.severe_distress


class Biomarkers(BaseModel):
    """Categorical behavioral signals derived from the video."""
    speech_latency: SpeechLatency
    affect_type: AffectType
    eye_contact: EyeContact


# =============================================================================
# Mental Status Examination (optional)
# =============================================================================

class Grooming(str, Enum):
    WELL_GROOMED = "well_groomed"
    DISHEVELED = "disheveled"
    UNKEMPT = "unkempt"
    BIZARRE = "bizarre"


class Dress(str, Enum):
    APPROPRIATE = "appropriate"
    INAPPROPRIATE = "inappropriate"
    DISHEVELED = "disheveled"
    BIZARRE = "bizarre"


class Hygiene(str, Enum):
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class Posture(str, Enum):
    RELAXED = "relaxed"
    TENSE = "tense"
    SLUMPED = "slumped"
    RIGID = "rigid"


class Psychomotor(str, Enum):
    NORMAL = "normal"
    RETARDED = "retarded"
    AGITATED = "agitated"
    CATATONIC = "catatonic"


class BehaviorEyeContact(str, Enum):
    APPROPRIATE = "appropriate"
    AVOIDANT = "avoidant"
    INTENSE = "intense"
    ABSENT = "absent"


class Cooperation(str, Enum):
    COOPERATIVE = "cooperative"
    GUARDED = "guarded"
    HOSTILE = "hostile"
    UNCOOPERATIVE = "uncooperative"


class Movements(str, Enum):
    NORMAL = "normal"
    RESTLESS = "restless"
    TREMOR = "tremor"
    TICS = "tics"
    STEREOTYPED = "stereotyped"


class SpeechRate(str, Enum):
    NORMAL = "normal"
    SLOW = "slow"
    RAPID = "rapid"
    PRESSURED = "pressured"


class SpeechVolume(str, Enum):
    NORMAL = "normal"
    SOFT = "soft"
    LOUD = "loud"
    WHISPERED = "whispered"


class SpeechTone(str, Enum):
    NORMAL = "normal"
    MONOTONE = "monotone"
    TREMULOUS = "tremulous"
    ANGRY = "angry"


class MSESpeechLatency(str, Enum):
    NORMAL = "normal"
    INCREASED = "increased"
    DECREASED = "decreased"


class Spontaneity(str, Enum):
    SPONTANEOUS = "spontaneous"
    ONLY_ANSWERS = "only_answers"
    MUTE = "mute"


class ReportedMood(str, Enum):
    EUTHYMIC = "euthymic"
    DEPRESSED = "depressed"
    ANXIOUS = "anxious"
    IRRITABLE = "irritable"
    EUPHORIC = "euphoric"
    ANGRY = "angry"


class ObservedAffect(str, Enum):
    FULL_RANGE = "full_range"
    FLAT = "flat"
    BLUNTED = "blunted"
    LABILE = "labile"
    ANXIOUS = "anxious"
    IRRITABLE = "irritable"


class AffectRange(str, Enum):
    FULL = "full"
    RESTRICTED = "restricted"
    FLAT = "flat"


class Congruence(str, Enum):
    CONGRUENT = "congruent"
    INCONGRUENT = "incongruent"


class Lability(str, Enum):
    STABLE = "stable"
    LABILE = "labile"


class Organization(str, Enum):
    ORGANIZED = "organized"
    DISORGANIZED = "disorganized"
    TANGENTIAL = "tangential"
    CIRCUMSTANTIAL = "circumstantial"


class ThoughtFlow(str, Enum):
    GOAL_DIRECTED = "goal_directed"
    LOOSE_ASSOCIATIONS = "loose_associations"
    FLIGHT_OF_IDEAS = "flight_of_ideas"
    THOUGHT_BLOCKING = "thought_blocking"


class Preoccupations(str, Enum):
    NONE = "none"
    HEALTH = "health"
    GUILT = "guilt"
    RELIGIOUS = "religious"
    SOMATIC = "somatic"
    OTHER = "other"


class Alertness(str, Enum):
    ALERT = "alert"
    DROWSY = "drowsy"
    LETHARGIC = "lethargic"
    OBTUNDED = "obtunded"


class Attention(str, Enum):
    INTACT = "intact"
    IMPAIRED = "impaired"
    DISTRACTIBLE = "distractible"


class Insight(str, Enum):
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    ABSENT = "absent"


class Judgment(str, Enum):
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    IMPAIRED = "impaired"


class MSEAppearance(BaseModel):
    grooming: Grooming
    dress: Dress
    hygiene: Hygiene
    posture: Posture


class MSEBehavior(BaseModel):
    psychomotor: Psychomotor
    eye_contact: BehaviorEyeContact
    cooperation: Cooperation
    movements: Movements


class MSESpeech(BaseModel):
    rate: SpeechRate
    volume: SpeechVolume
    tone: SpeechTone
    latency: MSESpeechLatency
    spontaneity: Spontaneity


class MSEMoodAffect(BaseModel):
    reported_mood: ReportedMood
    observed_affect: ObservedAffect
    affect_range: AffectRange
    congruence: Congruence
    lability: Lability


class MSEThoughtProcess(BaseModel):
    organization: Organization
    flow: ThoughtFlow


class MSEThoughtContent(BaseModel):
    preoccupations: Preoccupations
    hopelessness_expressed: bool
    worthlessness_expressed: bool


class MSECognition(BaseModel):
    alertness: Alertness
    attention: Attention
    estimated_insight: Insight
    estimated_judgment: Judgment


class MentalStatusExam(BaseModel):
    """
    Full Mental Status Examination.

    Optional in the assessment; when the model includes it, every section
    must be complete and valid.
    """
    appearance: MSEAppearance
    behavior: MSEBehavior
    speech: MSESpeech
    mood_affect: MSEMoodAffect
    thought_process: MSEThoughtProcess
    thought_content: MSEThoughtContent
    cognition: MSECognition


# =============================================================================
# Assessment
# =============================================================================

class Assessment(BaseModel):
    """
    Structured clinical assessment of one video check-in.

    Example:
        {
            "mood_score": 6,
            "risk_flags": {
                "suicidality_indicated": false,
                "self_harm_indicated": false,
                "severe_distress": false
            },
            "biomarkers": {
                "speech_latency": "normal",
                "affect_type": "full_range",
                "eye_contact": "normal"
            },
            "clinical_summary": "Patient presents as euthymic with full-range affect."
        }
    """

    mood_score: int = Field(
        ...,
        ge=1,
        le=10,
        description="1=Severely Depressed, 5=Euthymic, 10=Manic"
    )

    risk_flags: RiskFlags

    biomarkers: Biomarkers

    clinical_summary: str = Field(
        ...,
        min_length=1,
        max_length=2000,
        description="Concise 2-3 sentence medical abstract"
    )

    mse: MentalStatusExam | None = None

    @field_validator("clinical_summary")
    @classmethod
    def summary_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("clinical_summary must not be blank")
        return value


def compute_risk_flag(assessment: Assessment) -> bool:
    """
    Aggregate risk: any boolean indicator, or a mood score below 3.

    A mood score of exactly 3 does not raise the flag on its own.
    """
    return assessment.risk_flags.any() or assessment.mood_score < LOW_MOOD_THRESHOLD
