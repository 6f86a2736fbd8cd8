"""Build the non-MIT license warning sent by ``depscan --warn-non-mit``."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from depscan.models import Dependency
from depscan.notifications.base import Notification, NotificationLevel

# Discord rejects embed field values longer than 1024 characters.
_MAX_LISTED = 10


def build_non_mit_warning(deps: Sequence[Dependency]) -> Notification:
    listed = [f"• `{d.path}` ({d.version}) - **{d.license}**" for d in deps[:_MAX_LISTED]]
    if len(deps) > _MAX_LISTED:
        listed.append(f"... and {len(deps) - _MAX_LISTED} more")

    counts = Counter(d.license for d in deps)
    summary = "\n".join(f"• {name}: {counts[name]}" for name in sorted(counts))

    return Notification(
        level=NotificationLevel.WARNING,
        title="Non-MIT Licenses Detected",
        message=(
            f"Found **{len(deps)}** dependencies with non-MIT licenses "
            "that may require review."
        ),
        fields={"License Summary": summary, "Dependencies": "\n".join(listed)},
        group="License Scanner",
    )
