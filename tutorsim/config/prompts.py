"""LLM prompt templates for the transcript refinement passes.

Templates are plain string builders, not LangChain templates: the rendered
text is handed to the engine as a template *value*, so JSON braces in the
transcript never need escaping.
"""

from dataclasses import dataclass
from typing import Optional

from tutorsim.models.enums import StageKind

DEFAULT_SPEAKER_LABEL = "a student"

# Common instruction to keep the engine from wrapping the array in prose
JSON_ARRAY_ONLY_INSTRUCTION = "Return only the JSON array."

OUTPUT_SHAPE = """Return as JSON array:
[
  {
    "id": "unique_id",
    "text": "EXACT ORIGINAL TEXT",
    "isUser": true/false,
    "timestamp": "ISO timestamp"
  }
]"""

RULES = """Rules:
- Split where speaker changes
- isUser: true = tutor, false = student
- Keep exact original text
- Create realistic timestamps"""

SYSTEM_PROMPT = "You are an expert at {stage} conversation transcripts. Always return valid JSON."


@dataclass(frozen=True)
class StageTemplate:
    """Wording that distinguishes one refinement pass from another."""
    verb: str            # "splitting", "re-splitting", ...
    action: str          # "Split", "Re-split", ...
    identify: str        # "Identify", "Re-identify", ...
    input_heading: str
    quote_input: bool

    def render(self, stage_input: str, speaker_hint: Optional[str]) -> str:
        counterpart = speaker_hint.strip() if speaker_hint and speaker_hint.strip() else DEFAULT_SPEAKER_LABEL
        body = f'"{stage_input}"' if self.quote_input else stage_input

        return (
            f"You are {self.verb} a conversation transcript between a tutor and {counterpart}. \n"
            "\n"
            "Your ONLY job is to:\n"
            f"1. {self.action} the text into individual messages where speakers change\n"
            f"2. {self.identify} who is speaking (tutor vs student)\n"
            "3. Preserve the exact original text\n"
            "\n"
            f"{self.input_heading}:\n"
            f"{body}\n"
            "\n"
            f"{OUTPUT_SHAPE}\n"
            "\n"
            f"{RULES}\n"
            "\n"
            f"{JSON_ARRAY_ONLY_INSTRUCTION}"
        )


STAGE_TEMPLATES: dict[StageKind, StageTemplate] = {
    StageKind.INITIAL_PARSING: StageTemplate(
        verb="splitting",
        action="Split",
        identify="Identify",
        input_heading="Raw conversation text",
        quote_input=True,
    ),
    StageKind.REFINEMENT: StageTemplate(
        verb="re-splitting",
        action="Re-split",
        identify="Re-identify",
        input_heading="Current transcript",
        quote_input=False,
    ),
    StageKind.FINAL_POLISH: StageTemplate(
        verb="final-splitting",
        action="Final-split",
        identify="Final-identify",
        input_heading="Current transcript",
        quote_input=False,
    ),
}


def build_instruction(stage: StageKind, stage_input: str, speaker_hint: Optional[str] = None) -> str:
    """Render the user instruction for one pass.

    Args:
        stage: Which refinement pass.
        stage_input: Raw text (first pass) or a serialized utterance array.
        speaker_hint: Name of the virtual student, if known.

    Returns:
        The instruction text. Identical arguments give identical text.
    """
    return STAGE_TEMPLATES[stage].render(stage_input, speaker_hint)


def build_system_prompt(stage: StageKind) -> str:
    """System message sent alongside the instruction."""
    return SYSTEM_PROMPT.format(stage=stage.value)
