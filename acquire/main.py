import logging
import os
import sys
from typing import Optional, Sequence

from acquire.core.config import AcquireConfig, parse_arguments
from acquire.core.muxer import DotnetMuxer, SdkMuxer
from acquire.domain.errors import AcquireError, UsageError
from acquire.services.installer import WorkloadInstaller
from acquire.services.manifest_acquirer import ManifestAcquirer
from acquire.services.pack_resolver import resolve_packs, restore_packs
from acquire.storage.scratch import scratch_directory

LOG_LEVEL_ENV_VAR = "WORKLOAD_ACQUIRE_LOG_LEVEL"

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    level = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def acquire_workload(config: AcquireConfig, muxer: SdkMuxer) -> None:
    """
    Restore the manifest package and its packs into a scratch cache, then
    install them into the SDK and write the workload resolver sentinel.
    """
    logger.info(f"Targeting SDK : {config.resolved_sdk_directory}")

    with scratch_directory(config.scratch_root) as scratch:
        acquired = ManifestAcquirer(config, muxer).acquire(scratch)

        packs = resolve_packs(acquired.manifest, config.rid, config.workload_id)
        restore_packs(packs, scratch, muxer, config.target_framework)

        installer = WorkloadInstaller(config, muxer)
        installer.install_manifest(acquired.directory)
        installer.install_packs(packs, scratch)
        installer.enable_workload_resolver()


def main(argv: Optional[Sequence[str]] = None, muxer: Optional[SdkMuxer] = None) -> int:
    configure_logging()

    try:
        config = parse_arguments(sys.argv[1:] if argv is None else argv)
    except UsageError as e:
        logger.error(str(e))
        return e.exit_code

    try:
        acquire_workload(config, muxer or DotnetMuxer(config.muxer_path))
    except AcquireError as e:
        logger.error(str(e))
        return e.exit_code
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
