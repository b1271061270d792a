from __future__ import annotations

from substrait.algebra_pb2 import Expression, Rel


def push_filter_into_read(rel: Rel, condition: Expression) -> Rel | None:
    """Attach a pushed-down predicate to ReadRel.best_effort_filter as a hint.

    Accepts either a Read rel or a Filter directly over one. Any Filter rel is
    kept: best_effort_filter is a hint that the reader MAY use to skip data,
    not a guarantee.

    Returns None when there is no read to attach to, or when the read already
    carries a best_effort_filter.
    """
    rel_type = rel.WhichOneof("rel_type")
    if rel_type == "read":
        path = ()
    elif rel_type == "filter" and rel.filter.input.WhichOneof("rel_type") == "read":
        path = ("filter", "input")
    else:
        return None

    result = Rel()
    result.CopyFrom(rel)
    target = result
    for name in path:
        target = getattr(target, name)
    if target.read.HasField("best_effort_filter"):
        return None
    target.read.best_effort_filter.CopyFrom(condition)
    return result
