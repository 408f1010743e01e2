"""
Coordinate Mapper - model space back to source-frame and display space.

Inverts the letterbox transform recorded in PaddingInfo, then applies the
display ratio reported by the rendering side. Both stages are linear, so
the inverse helpers recover model-space boxes exactly (up to float error).
"""

from ..models import PaddingInfo, ScreenBox


class CoordinateMapper:
    """Maps [x1, y1, x2, y2] model-space boxes to display-space boxes."""

    def __init__(self, padding: PaddingInfo, display_ratio: tuple[float, float] = (1.0, 1.0)):
        """
        Args:
            padding: Transform produced by the preprocessor for this cycle
            display_ratio: (render_width / source_width, render_height / source_height)
        """
        self.padding = padding
        self.ratio_x, self.ratio_y = display_ratio

    @classmethod
    def for_display(
        cls, padding: PaddingInfo, display_size: tuple[float, float] | None
    ) -> "CoordinateMapper":
        """
        Build a mapper from the rendered size of the source frame.

        A missing or degenerate display size maps to source-frame pixels.
        """
        source_h, source_w = padding.original_shape
        if not display_size or source_w <= 0 or source_h <= 0:
            return cls(padding)
        render_w, render_h = display_size
        if render_w <= 0 or render_h <= 0:
            return cls(padding)
        return cls(padding, (render_w / source_w, render_h / source_h))

    def unpad(
        self, box: tuple[float, float, float, float]
    ) -> tuple[float, float, float, float]:
        """Model-space [x1, y1, x2, y2] to original-frame pixel space."""
        x1, y1, x2, y2 = box
        p = self.padding
        return (
            (x1 - p.pad_left) / p.scale,
            (y1 - p.pad_top) / p.scale,
            (x2 - p.pad_left) / p.scale,
            (y2 - p.pad_top) / p.scale,
        )

    def to_screen(self, box: tuple[float, float, float, float]) -> ScreenBox:
        """Model-space [x1, y1, x2, y2] to a display-space ScreenBox."""
        ux1, uy1, ux2, uy2 = self.unpad(box)
        return ScreenBox(
            x=ux1 * self.ratio_x,
            y=uy1 * self.ratio_y,
            width=(ux2 - ux1) * self.ratio_x,
            height=(uy2 - uy1) * self.ratio_y,
        )

    def to_model_space(
        self, box: tuple[float, float, float, float]
    ) -> tuple[float, float, float, float]:
        """Original-frame [x1, y1, x2, y2] to model space (inverse of unpad)."""
        x1, y1, x2, y2 = box
        p = self.padding
        return (
            x1 * p.scale + p.pad_left,
            y1 * p.scale + p.pad_top,
            x2 * p.scale + p.pad_left,
            y2 * p.scale + p.pad_top,
        )

    def from_screen(self, screen_box: ScreenBox) -> tuple[float, float, float, float]:
        """Display-space ScreenBox back to model-space [x1, y1, x2, y2]."""
        ux1 = screen_box.x / self.ratio_x
        uy1 = screen_box.y / self.ratio_y
        ux2 = ux1 + screen_box.width / self.ratio_x
        uy2 = uy1 + screen_box.height / self.ratio_y
        return self.to_model_space((ux1, uy1, ux2, uy2))
