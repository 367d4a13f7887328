"""Launch the mocap pose relay node with YAML defaults and optional overrides."""

from launch import LaunchDescription
from launch.actions import DeclareLaunchArgument, OpaqueFunction
from launch.substitutions import LaunchConfiguration, PathJoinSubstitution
from launch_ros.actions import Node
from launch_ros.substitutions import FindPackageShare

from mocap_pose_relay.launch_arguments import OVERRIDABLE_PARAMETERS, parameter_overrides

ARGUMENT_DESCRIPTIONS = {
    "host": "Tracking server the rigid bodies are streamed from",
    "frame": "Parent frame for ENU poses and transforms",
    "ned_frame": "Parent frame for NED poses and transforms",
    "trackers": "Comma-separated tracker names",
    "input_topic_template": "Raw pose topic per tracker, {name} is the sanitized name",
    "time_mode": "Timestamp resolution: offset, server or local",
    "normalize_orientation": "Normalize incoming quaternions (true/false)",
}


def launch_setup(context, *args, **kwargs):
    arguments = {
        name: LaunchConfiguration(name).perform(context)
        for name in OVERRIDABLE_PARAMETERS
    }
    return [
        Node(
            package="mocap_pose_relay",
            executable="mocap_pose_relay_node",
            name="mocap_pose_relay",
            parameters=[
                LaunchConfiguration("config_file"),
                parameter_overrides(arguments),
            ],
            output="screen",
        ),
    ]


def generate_launch_description():
    declared = [
        DeclareLaunchArgument(
            "config_file",
            default_value=PathJoinSubstitution([
                FindPackageShare("mocap_pose_relay"),
                "config",
                "trackers.yaml",
            ]),
            description="YAML file with tracker list and default parameters",
        ),
    ]
    for name in OVERRIDABLE_PARAMETERS:
        declared.append(
            DeclareLaunchArgument(
                name,
                default_value="",
                description=f"{ARGUMENT_DESCRIPTIONS[name]} (empty keeps the config file value)",
            )
        )
    return LaunchDescription(declared + [OpaqueFunction(function=launch_setup)])
