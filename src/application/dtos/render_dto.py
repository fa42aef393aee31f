"""DTOs exposing the render frame and tooltip requests over HTTP."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from src.domain.entities.chart import (
    Bar,
    Extremum,
    FillPath,
    GradientStop,
    Point,
    RenderFrame,
    Tooltip,
)


class BarDTO(BaseModel):
    x: float
    y: float
    width: float
    height: float
    value: float
    bucket_index: int

    @classmethod
    def from_domain(cls, bar: Bar) -> "BarDTO":
        return cls(
            x=bar.x,
            y=bar.y,
            width=bar.width,
            height=bar.height,
            value=bar.value,
            bucket_index=bar.bucket_index,
        )


class PointDTO(BaseModel):
    x: float
    y: float
    value: float
    bucket_index: int
    color: Optional[str] = None

    @classmethod
    def from_domain(cls, point: Point) -> "PointDTO":
        return cls(
            x=point.x,
            y=point.y,
            value=point.value,
            bucket_index=point.bucket_index,
            color=point.color,
        )


class FillDTO(BaseModel):
    path: str
    fade: bool = False
    mask_stops: List[Tuple[float, float]] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, fill: FillPath) -> "FillDTO":
        return cls(path=fill.path, fade=fill.fade, mask_stops=list(fill.mask_stops))


class GradientStopDTO(BaseModel):
    color: str
    offset: float

    @classmethod
    def from_domain(cls, stop: GradientStop) -> "GradientStopDTO":
        return cls(color=stop.color, offset=stop.offset)


class ExtremumDTO(BaseModel):
    type: str
    value: float
    timestamp: Optional[datetime] = None

    @classmethod
    def from_domain(cls, extremum: Extremum) -> "ExtremumDTO":
        return cls(type=extremum.type, value=extremum.value, timestamp=extremum.timestamp)


class TooltipDTO(BaseModel):
    entity_index: int
    bucket_index: int
    value: Union[float, str]
    time_range: Tuple[str, str]
    label: Optional[str] = None

    @classmethod
    def from_domain(cls, tooltip: Tooltip) -> "TooltipDTO":
        return cls(
            entity_index=tooltip.entity_index,
            bucket_index=tooltip.bucket_index,
            value=tooltip.value,
            time_range=tooltip.time_range,
            label=tooltip.label,
        )


class RenderFrameDTO(BaseModel):
    """Drawable output of the latest update cycle; maps are keyed by entity index."""

    sequence: int
    generated_at: datetime
    bound: Tuple[float, float]
    bound_secondary: Tuple[float, float]
    lines: Dict[int, str] = Field(default_factory=dict)
    fills: Dict[int, FillDTO] = Field(default_factory=dict)
    bars: Dict[int, List[BarDTO]] = Field(default_factory=dict)
    points: Dict[int, List[PointDTO]] = Field(default_factory=dict)
    gradients: Dict[int, List[GradientStopDTO]] = Field(default_factory=dict)
    extrema: List[ExtremumDTO] = Field(default_factory=list)
    color: Optional[str] = None
    tooltip: Optional[TooltipDTO] = None

    @classmethod
    def from_domain(cls, frame: RenderFrame) -> "RenderFrameDTO":
        return cls(
            sequence=frame.sequence,
            generated_at=frame.generated_at,
            bound=frame.bound,
            bound_secondary=frame.bound_secondary,
            lines=dict(frame.lines),
            fills={i: FillDTO.from_domain(fill) for i, fill in frame.fills.items()},
            bars={
                i: [BarDTO.from_domain(bar) for bar in bars]
                for i, bars in frame.bars.items()
            },
            points={
                i: [PointDTO.from_domain(point) for point in points]
                for i, points in frame.points.items()
            },
            gradients={
                i: [GradientStopDTO.from_domain(stop) for stop in stops]
                for i, stops in frame.gradients.items()
            },
            extrema=[ExtremumDTO.from_domain(item) for item in frame.extrema],
            color=frame.color,
            tooltip=TooltipDTO.from_domain(frame.tooltip) if frame.tooltip else None,
        )


class TooltipRequestDTO(BaseModel):
    """Hover position reported by the renderer."""

    entity_index: int = Field(0, ge=0)
    bucket_index: int = Field(..., ge=-1, description="-1 selects the current state")
    value: Union[float, str]
    label: Optional[str] = None


class RefreshResponseDTO(BaseModel):
    ran: bool = Field(description="False when a cycle was already in flight")
    sequence: Optional[int] = None
