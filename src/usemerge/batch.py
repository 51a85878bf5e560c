"""Merge the use sections of many output files concurrently.

Each output file is merged independently; a failure in one file is
reported in its own ``ErrorResult`` and never affects the others.
"""
from __future__ import annotations

import concurrent.futures
import logging
from typing import Mapping, Sequence

from usemerge.builder import Fragment, UseBuilder
from usemerge.core.config import UseMergeConfig
from usemerge.core.results import BatchResult, Result

logger = logging.getLogger(__name__)


def merge_file(name: str, fragments: Sequence[Fragment], config: UseMergeConfig) -> Result:
    """Merge and render the fragments of a single output file."""
    result = UseBuilder(config, fragments).build()
    result.target = name
    if result.success:
        logger.debug("Merged use section for %s: %s", name, result.message)
    else:
        logger.warning("Could not merge use section for %s: %s", name, result.message)
    return result


def merge_batch(
    files: Mapping[str, Sequence[Fragment]],
    config: UseMergeConfig | None = None,
    max_workers: int | None = None,
) -> BatchResult:
    """Merge every file's fragments on a thread pool.

    Parameters
    ----------
    files : Mapping[str, Sequence[Fragment]]
        Output file name to the fragments stitched into that file.
    config : UseMergeConfig | None
        Shared configuration. It is validated before any merge starts, so a
        bad configuration fails the whole batch up front.
    max_workers : int | None
        Thread pool size; ``1`` merges sequentially in the calling thread.

    Returns
    -------
    BatchResult
        One result per file, in the order of ``files``.
    """
    config = config or UseMergeConfig()
    names = list(files)
    logger.debug("Merging use sections for %d file(s)", len(names))

    if max_workers == 1 or len(names) <= 1:
        return BatchResult([merge_file(name, files[name], config) for name in names])

    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(merge_file, name, files[name], config) for name in names]
        return BatchResult([future.result() for future in futures])
