"""Application of pre- and postprocessing overrides."""

from collections.abc import Sequence
from dataclasses import replace

from booktally.audit.logger import AuditLogger
from booktally.decision import ReasonCode, Resolution
from booktally.models import Vote
from booktally.overrides.models import PostOverride, PostOverrideKey, PreOverride


def apply_pre_overrides(votes: Sequence[Vote], overrides: Sequence[PreOverride]) -> list[Vote]:
    """Rewrite ``original_string`` of every vote with the override rows in order.

    ``raw_string`` is never changed.

    Parameters
    ----------
    votes : Sequence[Vote]
        Votes as read from the ballot.
    overrides : Sequence[PreOverride]
        Compiled rules in file order.

    Returns
    -------
    list[Vote]
        New votes; unchanged votes are returned as-is.
    """
    result: list[Vote] = []
    for vote in votes:
        text = vote.original_string
        for override in overrides:
            text = override.apply(text)
        result.append(vote if text == vote.original_string else replace(vote, original_string=text))
    return result


def _overridden(resolution: Resolution, title: str | None, author: str | None) -> Resolution:
    reason = ReasonCode.MANUAL_OVERRIDE if title is not None else ReasonCode.MANUAL_OVERRIDE_CLEARED
    return replace(resolution, final_title=title, final_author=author, reason=reason)


def apply_post_overrides(
    votes: Sequence[Vote],
    resolutions: Sequence[Resolution],
    overrides: Sequence[PostOverride],
    logger: AuditLogger | None = None,
) -> tuple[list[Resolution], set[str]]:
    """Replace final values according to postprocessing override rows.

    Rows apply in file order and each row sees the results of the rows
    before it. Title and author rows only touch resolved votes.

    Parameters
    ----------
    votes : Sequence[Vote]
        Votes, aligned by vote_id with ``resolutions``.
    resolutions : Sequence[Resolution]
        Resolutions after case normalization.
    overrides : Sequence[PostOverride]
        Rules in file order.
    logger : AuditLogger | None, optional
        Receives one ``record_flagged`` event per changed vote and rule.

    Returns
    -------
    tuple[list[Resolution], set[str]]
        New resolutions in input order, and the ids of votes any rule touched.
    """
    raw_by_id = {vote.vote_id: vote.raw_string for vote in votes}
    current = list(resolutions)
    touched: set[str] = set()

    for override in overrides:
        for i, resolution in enumerate(current):
            match override.key:
                case PostOverrideKey.RAW_ENTRY:
                    if raw_by_id[resolution.vote_id] != override.match:
                        continue
                    updated = _overridden(
                        resolution, override.replacement_title, override.replacement_author
                    )
                case PostOverrideKey.TITLE:
                    if resolution.final_title != override.match:
                        continue
                    updated = _overridden(
                        resolution, override.replacement_title, resolution.final_author
                    )
                case PostOverrideKey.AUTHOR:
                    if resolution.final_author != override.match:
                        continue
                    updated = _overridden(
                        resolution, resolution.final_title, override.replacement_author
                    )

            current[i] = updated
            touched.add(resolution.vote_id)
            if logger:
                logger.record_flagged(
                    vote_id=resolution.vote_id,
                    flag_name="override",
                    reason_code=f"{override.key.value}:line{override.line}",
                )

    return current, touched
