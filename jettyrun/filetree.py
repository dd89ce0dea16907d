# Copyright 2025 Ralph Lemke
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Directory tree copying with per-file filtering."""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable
from pathlib import Path

KeepPredicate = Callable[[Path], bool]


def copy_tree(
    source: str | Path,
    target: str | Path,
    keep: KeepPredicate | None = None,
) -> list[Path]:
    """Mirror *source* into *target*, copying only files accepted by *keep*.

    The walk is depth first, follows symbolic links and has no depth limit.
    Directories that already exist in *target* are reused; any other
    file in the way of a directory is an error.

    Args:
        source: Root of the tree to copy
        target: Root of the mirrored tree
        keep: Predicate called with each source file; ``False`` skips it

    Returns:
        The target paths of all copied files.

    Raises:
        FileExistsError: If a non-directory occupies a mirrored directory path.
        OSError: On any other I/O failure.
    """
    source_root = Path(source)
    target_root = Path(target)
    copied: list[Path] = []

    for dirpath, _dirnames, filenames in os.walk(source_root, followlinks=True, onerror=_raise):
        current = Path(dirpath)
        mirrored = target_root / current.relative_to(source_root)
        _make_dir(mirrored)

        for name in sorted(filenames):
            file_path = current / name
            if keep is not None and not keep(file_path):
                continue
            destination = mirrored / name
            shutil.copyfile(file_path, destination)
            copied.append(destination)

    return copied


def remove_tree(path: str | Path) -> bool:
    """Delete *path* and everything below it. Returns whether it existed."""
    p = Path(path)
    if p.is_symlink() or p.is_file():
        p.unlink()
        return True
    if p.exists():
        shutil.rmtree(p)
        return True
    return False


def _make_dir(path: Path) -> None:
    try:
        path.mkdir()
    except FileExistsError:
        if not path.is_dir():
            raise


def _raise(error: OSError) -> None:
    raise error


# -- Predicates --------------------------------------------------------------


def skip_same_file(excluded: str | Path | None) -> KeepPredicate:
    """Reject the file that is the same filesystem object as *excluded*."""

    def keep(path: Path) -> bool:
        if excluded is None:
            return True
        try:
            return not os.path.samefile(excluded, path)
        except FileNotFoundError:
            return True

    return keep


def skip_named_in(name: str, parent_name: str) -> KeepPredicate:
    """Reject files called *name* whose parent directory is *parent_name*."""

    def keep(path: Path) -> bool:
        return not (path.name == name and path.parent.name == parent_name)

    return keep


def all_of(*predicates: KeepPredicate) -> KeepPredicate:
    """Keep a file only if every predicate keeps it."""

    def keep(path: Path) -> bool:
        return all(predicate(path) for predicate in predicates)

    return keep
