"""
Sync operations module.

Handles diffing, uploading, remote cleanup and the deploy pipeline.
"""

from .plan import DeployPlan
from .inventory import list_remote_objects
from .uploader import FileUploader, UploadResult
from .reconciler import compute_delete_keys, delete_remote_keys
from .deployer import Deployer, DeployResult, deploy, deploy_async

__all__ = [
    # Plan
    "DeployPlan",
    # Inventory
    "list_remote_objects",
    # Uploader
    "FileUploader",
    "UploadResult",
    # Reconciler
    "compute_delete_keys",
    "delete_remote_keys",
    # Pipeline
    "Deployer",
    "DeployResult",
    "deploy",
    "deploy_async",
]
