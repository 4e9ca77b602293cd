"""Reader for Maven ``pom.xml`` build descriptors."""

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path

from pluginhealth.errors import DescriptorError

logger = logging.getLogger(__name__)

_PROPERTY_REFERENCE = re.compile(r"\$\{([^}]+)\}")


@dataclass(frozen=True)
class MavenDependency:
    group_id: str | None
    artifact_id: str | None
    version: str | None = None
    scope: str | None = None
    optional: bool = False

    @property
    def coordinates(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


@dataclass
class MavenProject:
    """The parts of a pom.xml the probes look at."""

    artifact_id: str | None = None
    group_id: str | None = None
    version: str | None = None
    packaging: str = "jar"
    parent: MavenDependency | None = None
    properties: dict[str, str] = field(default_factory=dict)
    dependencies: list[MavenDependency] = field(default_factory=list)
    dependency_management: list[MavenDependency] = field(default_factory=list)


def _local(tag: str) -> str:
    """Strip the XML namespace from a tag."""
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element | None, name: str) -> ET.Element | None:
    if element is None:
        return None
    return next((c for c in element if _local(c.tag) == name), None)


def _text(element: ET.Element | None, name: str) -> str | None:
    child = _child(element, name)
    if child is None or child.text is None:
        return None
    return child.text.strip() or None


def _resolve(value: str | None, properties: dict[str, str]) -> str | None:
    """Substitute ${property} references. Unknown references are left as-is."""
    if value is None:
        return None
    return _PROPERTY_REFERENCE.sub(lambda m: properties.get(m.group(1), m.group(0)), value)


def _dependencies(container: ET.Element | None, properties: dict[str, str]) -> list[MavenDependency]:
    if container is None:
        return []
    return [
        MavenDependency(
            group_id=_resolve(_text(dep, "groupId"), properties),
            artifact_id=_resolve(_text(dep, "artifactId"), properties),
            version=_resolve(_text(dep, "version"), properties),
            scope=_text(dep, "scope"),
            optional=_text(dep, "optional") == "true",
        )
        for dep in container
        if _local(dep.tag) == "dependency"
    ]


def read_pom(path: Path) -> MavenProject:
    """Parse a pom.xml file.

    Args:
        path: Path to the pom.xml file

    Returns:
        The parsed project

    Raises:
        DescriptorError: If the file is not well-formed XML or not a Maven project
    """
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        raise DescriptorError(f"Malformed descriptor {path}: {e}") from e

    if _local(root.tag) != "project":
        raise DescriptorError(f"{path} is not a Maven project descriptor")

    properties = {}
    properties_element = _child(root, "properties")
    if properties_element is not None:
        properties = {_local(p.tag): (p.text or "").strip() for p in properties_element}

    parent_element = _child(root, "parent")
    parent = None
    if parent_element is not None:
        parent = MavenDependency(
            group_id=_text(parent_element, "groupId"),
            artifact_id=_text(parent_element, "artifactId"),
            version=_resolve(_text(parent_element, "version"), properties),
        )

    version = _text(root, "version") or (parent.version if parent else None)
    group_id = _text(root, "groupId") or (parent.group_id if parent else None)
    if version:
        properties.setdefault("project.version", version)

    project = MavenProject(
        artifact_id=_text(root, "artifactId"),
        group_id=group_id,
        version=_resolve(version, properties),
        packaging=_text(root, "packaging") or "jar",
        parent=parent,
        properties=properties,
        dependencies=_dependencies(_child(root, "dependencies"), properties),
        dependency_management=_dependencies(
            _child(_child(root, "dependencyManagement"), "dependencies"), properties
        ),
    )
    logger.debug(f"Read {path}: {project.artifact_id} ({len(project.dependencies)} dependencies)")
    return project
