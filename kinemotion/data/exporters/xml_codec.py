"""
XML interchange format for motion clips.

Document layout (element and attribute names are fixed):

    <Motion>
      <Data Interval="200" Length="3.397" Keyframes="18">
        <Frame Time="0.0">
          <JointData>
            <Name>Head</Name>
            <Position><X>0.064</X><Y>0.847</Y><Z>1.988</Z></Position>
            <Angles><Roll>0.0</Roll><Yaw>0.0</Yaw><Pitch>19.868</Pitch></Angles>
          </JointData>
          ...
        </Frame>
        ...
      </Data>
    </Motion>

`Length` holds the clip duration in seconds. The Pelvis `<Position>` carries
the derived pelvis angles as (0, pitch, yaw) rather than a position.
"""

import logging
from pathlib import Path
from typing import Callable, Optional, TypeVar
import xml.etree.ElementTree as ET

from kinemotion.data.motion_data import MotionClip
from kinemotion.data.skeleton import Pose, JointKind, JOINT_ORDER, ROLL, PITCH, YAW
from kinemotion.errors import ClipNotFinalizedError, MalformedInterchangeError

logger = logging.getLogger(__name__)

ROOT_TAG = "Motion"

T = TypeVar("T", int, float)


def _format_number(value: float) -> str:
    """Locale-invariant text that parses back to the same float."""
    return repr(float(value))


def _parse_number(text: Optional[str], kind: Callable[[str], T], what: str) -> T:
    if text is None:
        raise MalformedInterchangeError(f"Missing {what}")
    try:
        return kind(text.strip())
    except ValueError:
        raise MalformedInterchangeError(f"Invalid {what}: {text!r}") from None


def _required_attribute(element: ET.Element, name: str) -> str:
    value = element.get(name)
    if value is None:
        raise MalformedInterchangeError(f"<{element.tag}> is missing attribute {name!r}")
    return value


def _triple_element(tag: str, names, values) -> ET.Element:
    element = ET.Element(tag)
    for name, value in zip(names, values):
        ET.SubElement(element, name).text = _format_number(value)
    return element


class InterchangeCodec:
    """
    Reads and writes motion clips in the XML interchange format.

    Joints with unknown names are skipped on decode and their slots keep
    default values.
    """

    def __init__(self, legacy_pelvis: bool = True, pretty_print: bool = True):
        """
        Initialize the codec.

        Args:
            legacy_pelvis: Store pelvis pitch/yaw in the Pelvis <Position>
                Y/Z fields, as existing recordings do
            pretty_print: Indent written files
        """
        self.legacy_pelvis = legacy_pelvis
        self.pretty_print = pretty_print

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def _joint_element(self, pose: Pose, kind: JointKind) -> ET.Element:
        position = pose.position(kind)
        if kind is JointKind.PELVIS and self.legacy_pelvis:
            if position.any():
                logger.warning(
                    f"Pelvis position {position.tolist()} at t={pose.time:.1f}ms "
                    f"is not stored in legacy pelvis mode"
                )
            position = (0.0, pose.pelvis_pitch, pose.pelvis_yaw)

        angles = pose.orientation(kind)

        joint = ET.Element("JointData")
        ET.SubElement(joint, "Name").text = kind.value
        joint.append(_triple_element("Position", ("X", "Y", "Z"), position))
        joint.append(_triple_element(
            "Angles",
            ("Roll", "Yaw", "Pitch"),
            (angles[ROLL], angles[YAW], angles[PITCH]),
        ))
        return joint

    def to_tree(self, clip: MotionClip) -> ET.Element:
        """
        Build the <Data> element for a finalized clip.

        Raises:
            ClipNotFinalizedError: If the clip has not been finalized
        """
        if not clip.is_finalized:
            raise ClipNotFinalizedError("Finalize the clip before exporting it")

        data = ET.Element("Data")
        data.set("Interval", str(int(clip.interval_ms)))
        data.set("Length", _format_number(clip.duration))
        data.set("Keyframes", str(clip.keyframe_count))

        for pose in clip.keyframes:
            frame = ET.SubElement(data, "Frame")
            frame.set("Time", _format_number(pose.time))
            for kind in JOINT_ORDER:
                frame.append(self._joint_element(pose, kind))

        return data

    def to_string(self, clip: MotionClip) -> str:
        """Serialize a clip to an XML document string."""
        root = ET.Element(ROOT_TAG)
        root.append(self.to_tree(clip))
        if self.pretty_print:
            ET.indent(root)
        return ET.tostring(root, encoding="unicode")

    def export(self, clip: MotionClip, output_path: Path) -> bool:
        """
        Export motion clip to an XML file.

        Args:
            clip: Finalized motion clip
            output_path: Output file path

        Returns:
            True if successful, False for an empty clip
        """
        if clip.keyframe_count == 0:
            return False

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            f.write('<?xml version="1.0" encoding="utf-8"?>\n')
            f.write(self.to_string(clip))
            f.write("\n")

        logger.info(f"Exported {clip.keyframe_count} keyframes to {output_path}")
        return True

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def _read_joint(self, element: ET.Element, pose: Pose):
        name_node = element.find("Name")
        name = name_node.text.strip() if name_node is not None and name_node.text else None
        kind = JointKind.from_name(name) if name else None
        if kind is None:
            logger.debug(f"Skipping joint with unknown name {name!r}")
            return

        sample = pose.joint(kind)

        position = list(sample.position)
        position_node = element.find("Position")
        if position_node is not None:
            for axis, tag in enumerate(("X", "Y", "Z")):
                node = position_node.find(tag)
                if node is not None:
                    position[axis] = _parse_number(node.text, float, f"{kind.value} {tag}")

        angles_node = element.find("Angles")
        if angles_node is not None:
            for attr, tag in (("roll", "Roll"), ("yaw", "Yaw"), ("pitch", "Pitch")):
                node = angles_node.find(tag)
                if node is not None:
                    setattr(sample, attr, _parse_number(node.text, float, f"{kind.value} {tag}"))

        if kind is JointKind.PELVIS and self.legacy_pelvis:
            pose.pelvis_pitch = position[1]
            pose.pelvis_yaw = position[2]
            position = [0.0, 0.0, 0.0]

        sample.position[:] = position
        pose.set_joint(kind, sample)

    def from_tree(self, root: ET.Element) -> MotionClip:
        """
        Rebuild a clip from a <Data> element or any ancestor of one.

        Raises:
            MalformedInterchangeError: If the document structure is invalid
        """
        data = root if root.tag == "Data" else root.find(".//Data")
        if data is None:
            raise MalformedInterchangeError("No <Data> element found")

        interval = _parse_number(_required_attribute(data, "Interval"), int, "Interval")
        duration = _parse_number(_required_attribute(data, "Length"), float, "Length")
        declared = _parse_number(_required_attribute(data, "Keyframes"), int, "Keyframes")

        clip = MotionClip(interval_ms=interval)

        for frame in data.iter("Frame"):
            pose = Pose(time=_parse_number(_required_attribute(frame, "Time"), float, "Time"))
            for joint in frame.iter("JointData"):
                self._read_joint(joint, pose)
            clip.add_keyframe(pose)

        if declared != clip.keyframe_count:
            logger.warning(
                f"Keyframes attribute says {declared}, found {clip.keyframe_count} frames"
            )

        clip.restore(duration)
        return clip

    def from_string(self, text: str) -> MotionClip:
        """Parse a clip from an XML document string."""
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise MalformedInterchangeError(f"Invalid XML: {e}") from e
        return self.from_tree(root)

    def load(self, file_path: Path) -> MotionClip:
        """Load a clip from an XML file."""
        try:
            tree = ET.parse(file_path)
        except ET.ParseError as e:
            raise MalformedInterchangeError(f"Invalid XML in {file_path}: {e}") from e

        clip = self.from_tree(tree.getroot())
        logger.info(f"Loaded {clip.keyframe_count} keyframes from {file_path}")
        return clip


def to_interchange_tree(clip: MotionClip) -> ET.Element:
    """Build the <Data> element for a finalized clip."""
    return InterchangeCodec().to_tree(clip)


def from_interchange_tree(root: ET.Element) -> MotionClip:
    """Rebuild a clip from a <Data> element or any ancestor of one."""
    return InterchangeCodec().from_tree(root)
