"""Project descriptor reader - Parse project.json files.

Only the package name is needed to decide where a local project installs.
"""

import json
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import ValidationError

from .exceptions import MalformedDescriptorError

PROJECT_DESCRIPTOR = "project.json"


class ProjectDescriptor(BaseModel):
    """
    Project metadata from project.json.

    Unknown keys (dependencies, frameworks, buildOptions, ...) are ignored.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    version: str | None = None

    @classmethod
    def from_project_json(cls, descriptor_path: Path) -> "ProjectDescriptor":
        """
        Load project metadata from project.json.

        Args:
            descriptor_path: Path to project.json file

        Returns:
            ProjectDescriptor instance

        Raises:
            MalformedDescriptorError: If the file is missing, not a JSON object,
                or has no non-empty "name"
        """
        context = {"descriptor": str(descriptor_path)}

        try:
            with open(descriptor_path, encoding="utf-8-sig") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise MalformedDescriptorError(f"{PROJECT_DESCRIPTOR} not found: {descriptor_path}", context) from e
        except (OSError, json.JSONDecodeError) as e:
            raise MalformedDescriptorError(f"Could not parse {descriptor_path}: {e}", context) from e

        if not isinstance(data, dict):
            raise MalformedDescriptorError(f"{descriptor_path} must contain a JSON object", context)

        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise MalformedDescriptorError(f"No package name found in {descriptor_path}", context)

        version = data.get("version")
        try:
            return cls(name=name.strip(), version=version if isinstance(version, str) else None)
        except ValidationError as e:
            raise MalformedDescriptorError(f"Invalid {PROJECT_DESCRIPTOR}: {e}", context) from e


def find_project_descriptor(source_folder: Path) -> Path:
    """Locate project.json directly inside source_folder.

    Raises:
        MalformedDescriptorError: If the folder has no project.json
    """
    candidate = source_folder / PROJECT_DESCRIPTOR
    if not candidate.is_file():
        raise MalformedDescriptorError(
            f"No {PROJECT_DESCRIPTOR} found in source folder {source_folder}",
            context={"source": str(source_folder)},
        )
    return candidate


def read_package_name(descriptor_path: Path) -> str:
    """Read the package name declared by a project descriptor."""
    return ProjectDescriptor.from_project_json(descriptor_path).name
