import re
from pathlib import Path
from media_importer.core.common.exceptions import PlanningError
from media_importer.features.source_scanner.domain.models import SourceFile
from media_importer.features.storage.domain.interfaces import IDestinationResolver, IUniqueNameGenerator
from ..domain.models import DestinationPlan


def normalize_relative_dir(value: str) -> str:
    """
    "\\a//b/" -> "a/b". Empty input stays empty.
    """
    value = value.replace("\\", "/")
    value = re.sub(r"/+", "/", value)
    value = value.strip("/")
    return "" if value == "." else value


def join_url_path(*parts: str) -> str:
    """Joins path fragments with "/", skipping empty ones."""
    return "/".join(p.strip("/") for p in parts if p and p.strip("/"))


class PathPlanner:
    """
    Computes the destination of a source file, mirroring its
    sub-directory under the current upload base.
    """

    def __init__(self, resolver: IDestinationResolver, names: IUniqueNameGenerator):
        self.resolver = resolver
        self.names = names

    def begin_run(self) -> None:
        self.names.reset()

    def relative_dir(self, root: Path, source: SourceFile) -> str:
        try:
            relative = source.path.parent.relative_to(root)
        except ValueError:
            # Source outside root: keep it at the top level
            return ""
        return normalize_relative_dir(relative.as_posix())

    def plan(self, root: Path, source: SourceFile) -> DestinationPlan:
        relative_dir = self.relative_dir(root, source)

        # Re-resolved per file: the bucket may roll over mid-run
        base = self.resolver.resolve()
        dest_dir = base.base_dir / relative_dir if relative_dir else base.base_dir

        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PlanningError(f"Could not create directory {dest_dir}: {e.strerror or e}") from e

        try:
            unique_name = self.names.unique_name(dest_dir, source.basename)
        except OSError as e:
            raise PlanningError(f"Could not list directory {dest_dir}: {e.strerror or e}") from e

        return DestinationPlan(
            relative_dir=relative_dir,
            unique_name=unique_name,
            dest_dir=dest_dir,
            dest_path=dest_dir / unique_name,
            relative_stored_path=join_url_path(base.bucket_path, relative_dir, unique_name),
            candidate_stored_path=join_url_path(base.bucket_path, relative_dir, source.basename),
            public_url=f"{base.base_url.rstrip('/')}/{join_url_path(relative_dir, unique_name)}"
        )
