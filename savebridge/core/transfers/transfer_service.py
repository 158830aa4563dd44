from __future__ import annotations

from core.profiles.models import Profile
from core.remote.client_base import Host
from core.remote.commands import join_remote
from core.saves.models import FileManifest, ManifestEntry, StoragePaths
from core.transfers.transfer_models import CopyOperation, TransferPlan


def build_plan(
    source_host: Host,
    source_profile: Profile,
    source_paths: StoragePaths,
    dest_host: Host,
    dest_profile: Profile,
    dest_paths: StoragePaths,
    manifest: FileManifest,
) -> TransferPlan:
    return TransferPlan(
        source_host=source_host,
        source_profile=source_profile,
        source_paths=source_paths,
        dest_host=dest_host,
        dest_profile=dest_profile,
        dest_paths=dest_paths,
        manifest=manifest,
    )


def route_destination(entry: ManifestEntry, dest_paths: StoragePaths) -> str:
    return join_remote(dest_paths.root_for(entry.kind), entry.relative_path)


def plan_copy_operations(plan: TransferPlan) -> list[CopyOperation]:
    return [
        CopyOperation(
            kind=entry.kind,
            source_path=entry.path,
            dest_path=route_destination(entry, plan.dest_paths),
            size_bytes=entry.size_bytes,
        )
        for entry in plan.manifest.entries
    ]
