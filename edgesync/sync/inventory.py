"""
Remote inventory listing.
"""

from typing import List

from ..core.logging import debug_log
from ..storage.client import RemoteObject


async def list_remote_objects(store) -> List[RemoteObject]:
    """
    List every object in the bucket, following continuation tokens.

    Pages are fetched one after another since each request needs the token
    from the previous response. Any page failure propagates: callers either
    get the complete inventory or an exception.
    """
    objects: List[RemoteObject] = []
    token = None
    pages = 0

    while True:
        page = await store.list_page(token)
        pages += 1
        objects.extend(page.items)
        token = page.next_token
        if not token:
            break

    debug_log(f"inventory: {len(objects)} objects in {pages} page(s)")
    return objects
