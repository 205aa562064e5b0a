"""Plan orchestration entry points."""

from .plan import PlanHelper, decode_plan, generate_plan_file_name

__all__ = ["PlanHelper", "decode_plan", "generate_plan_file_name"]
