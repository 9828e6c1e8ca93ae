"""PlanOfAction: a structured, ordered-step representation of a task.

Plans can be exported to JSON, Markdown or a plain description for audit.
Exported files are never read back.
"""

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Literal

logger = logging.getLogger(__name__)

FinishReason = Literal["COMPLETED", "ABORTED", "FAILED"]


@dataclass
class PlanStep:
    """A single step of a plan."""

    description: str
    required: bool = True
    completed: bool = False


class PlanOfAction:
    """An ordered list of steps with a cursor and a finish state."""

    def __init__(self, title: str, steps: list[PlanStep | dict[str, Any]]) -> None:
        """Initialize a PlanOfAction.

        Args:
            title: Short title of the plan
            steps: Steps as PlanStep objects or dicts with description,
                   required and optionally completed
        """
        self.title = title
        self.steps: list[PlanStep] = [
            step if isinstance(step, PlanStep) else PlanStep(**step) for step in steps
        ]
        self.current_step = 0
        self.completed = False
        self.finished = False
        self.finish_reason: FinishReason | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlanOfAction":
        """Build a plan from a {"title", "steps"} dictionary."""
        return cls(title=data["title"], steps=list(data.get("steps", [])))

    def describe(self) -> str:
        """Render the plan as text for the decision model."""
        lines = [f"Title: {self.title}", "Steps:"]
        for step in self.steps:
            flag = "REQUIRED" if step.required else "OPTIONAL"
            lines.append(f"- {step.description} ({flag})")
        return "\n".join(lines)

    def get_current_step(self) -> PlanStep | None:
        """Get the step under the cursor, or None when all steps are done."""
        if self.current_step < len(self.steps):
            return self.steps[self.current_step]
        return None

    @property
    def is_exhausted(self) -> bool:
        return self.current_step >= len(self.steps)

    def next_step(self) -> None:
        self.current_step += 1

    def complete_current_step(self) -> None:
        """Mark the current step completed and move the cursor forward."""
        step = self.get_current_step()
        if step is None:
            return
        step.completed = True
        self.next_step()

    def mark_completed(self) -> None:
        self.completed = True
        self.finished = True
        self.finish_reason = "COMPLETED"

    def mark_finished(self, reason: Literal["ABORTED", "FAILED"]) -> None:
        self.completed = False
        self.finished = True
        self.finish_reason = reason

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "steps": [asdict(step) for step in self.steps],
            "current_step": self.current_step,
            "completed": self.completed,
            "finished": self.finished,
            "finish_reason": self.finish_reason,
        }

    def to_markdown(self) -> str:
        lines = [
            f"# {self.title}",
            "",
            f"**Completed**: {'YES' if self.completed else 'NO'}",
            f"**Finished**: {'YES' if self.finished else 'NO'}",
            f"**Finish Reason**: {self.finish_reason or 'N/A'}",
            "",
            "## Steps",
        ]
        for index, step in enumerate(self.steps, start=1):
            flag = "REQUIRED" if step.required else "OPTIONAL"
            checkbox = "[x]" if step.completed else "[ ]"
            lines.append(f"### Step {index}: {step.description} ({flag})")
            lines.append(checkbox)
            lines.append("")
        return "\n".join(lines)

    def record_json(self, to: Path) -> None:
        """Write the plan state to a JSON file."""
        to.parent.mkdir(parents=True, exist_ok=True)
        with open(to, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        logger.debug(f"Recorded plan '{self.title}' to {to}")

    def record_markdown(self, to: Path) -> None:
        """Write the plan state to a Markdown file."""
        to.parent.mkdir(parents=True, exist_ok=True)
        to.write_text(self.to_markdown(), encoding="utf-8")
        logger.debug(f"Recorded plan '{self.title}' to {to}")

    def record_description(self, to: Path) -> None:
        to.parent.mkdir(parents=True, exist_ok=True)
        to.write_text(self.describe(), encoding="utf-8")
