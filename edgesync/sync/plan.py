"""
Deploy plan: what one deploy changed on the remote side.
"""

from dataclasses import dataclass, field


@dataclass
class DeployPlan:
    """
    Keys touched by a deploy.

    changed_keys only ever receives keys whose upload succeeded. Entries are
    added from the event loop thread by FileUploader's collector, never from
    worker threads, so concurrent uploads can't lose entries.
    """
    changed_keys: set[str] = field(default_factory=set)
    delete_keys: set[str] = field(default_factory=set)

    def mark_uploaded(self, key: str):
        self.changed_keys.add(key)
