from typing import List

from innerbind.spec import InsertionPoint, PatchPlan


def render_declaration(name: str, prefix: str) -> str:
    return f"const {name} = this.{prefix}{name};"


def render_point(point: InsertionPoint, prefix: str) -> str:
    return point.lead + "".join(
        render_declaration(name, prefix) + point.separator for name in point.names
    )


def apply_patch_plan(source: bytes, plan: PatchPlan, prefix: str) -> bytes:
    """
    Splices every insertion point into ``source`` in a single backward pass.

    Points are visited by descending offset, so each cut is taken against the
    untouched original buffer. Segments are collected back to front and
    reversed once at the end.
    """
    segments: List[bytes] = []
    last = len(source)
    for point in plan.descending():
        if not point.names:
            continue
        if not 0 <= point.offset <= last:
            raise ValueError(f"Insertion offset {point.offset} outside 0..{last}")
        segments.append(source[point.offset : last])
        segments.append(render_point(point, prefix).encode("utf-8"))
        last = point.offset
    segments.append(source[:last])
    segments.reverse()
    return b"".join(segments)
