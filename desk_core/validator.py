from typing import List, Literal

from pydantic import BaseModel

from .schema import DeskConfiguration, BaseUnitType, UpperUnitType
from .layout import STORAGE_WIDTH, CEILING_GAP, BaseBandSolver, UpperBandSolver


class ValidationIssue(BaseModel):
    rule_name: str
    severity: Literal["critical", "warning", "info"]
    message: str
    affected_items: List[str]


def validate_layout(config: DeskConfiguration) -> List[ValidationIssue]:
    """
    Advisory checks only. The layout engine stays permissive: nothing here
    changes what gets built, it just tells the user about odd widths.
    """
    report = []
    room_w = config.room.width
    layout = config.base_layout

    storage_count = sum(1 for t in layout if t != BaseUnitType.EMPTY)
    storage_w = storage_count * STORAGE_WIDTH
    knee_w = BaseBandSolver.knee_space_width(room_w, layout)

    if knee_w is None and layout and storage_w != room_w:
        report.append(ValidationIssue(
            rule_name="base_width_mismatch",
            severity="warning",
            message=f"Base units span {storage_w:g}\" but the wall is {room_w:g}\" and there is no knee space to absorb the difference",
            affected_items=[t.value for t in layout],
        ))

    if knee_w is not None and knee_w < 0:
        report.append(ValidationIssue(
            rule_name="negative_knee_space",
            severity="warning",
            message=f"Storage units ({storage_w:g}\") are wider than the wall ({room_w:g}\"); knee space would be {knee_w:g}\"",
            affected_items=[BaseUnitType.EMPTY.value],
        ))

    if config.monitor_count > 0 and BaseUnitType.EMPTY not in layout:
        report.append(ValidationIssue(
            rule_name="monitors_without_knee_space",
            severity="info",
            message="No knee space in the base layout; monitors are centred over the middle unit",
            affected_items=["monitor"],
        ))

    if not config.has_uppers:
        return report

    upper_h = config.room.height - (config.desk_height + config.upper_height_from_desk) - CEILING_GAP
    if upper_h <= 0:
        report.append(ValidationIssue(
            rule_name="no_room_for_uppers",
            severity="warning",
            message=f"Upper cabinets would be {upper_h:g}\" tall; lower them or raise the ceiling",
            affected_items=[t.value for t in config.upper_layout],
        ))

    tv_gaps = config.upper_layout.count(UpperUnitType.TV_GAP)
    if tv_gaps > 1:
        report.append(ValidationIssue(
            rule_name="multiple_tv_gaps",
            severity="info",
            message=f"{tv_gaps} TV gaps in the upper layout; only the first is sized for the TV",
            affected_items=[UpperUnitType.TV_GAP.value],
        ))

    if tv_gaps:
        widths = UpperBandSolver.slot_widths(room_w, config.upper_layout, config.tv_size)
        if min(widths) < 0:
            report.append(ValidationIssue(
                rule_name="tv_gap_too_wide",
                severity="warning",
                message=f"TV gap ({UpperBandSolver.tv_gap_width(config.tv_size):g}\") leaves no room for the other uppers",
                affected_items=[UpperUnitType.TV_GAP.value],
            ))

    return report
