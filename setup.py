from setuptools import find_packages, setup
import os
from glob import glob

package_name = "mocap_pose_relay"

setup(
    name=package_name,
    version="0.1.0",
    packages=find_packages(exclude=["test"]),
    data_files=[
        ("share/ament_index/resource_index/packages", ["resource/" + package_name]),
        ("share/" + package_name, ["package.xml"]),
        (os.path.join("share", package_name, "config"), glob("config/*.yaml")),
        (os.path.join("share", package_name, "launch"), glob("launch/*.launch.py")),
    ],
    install_requires=["setuptools", "numpy"],
    extras_require={
        "test": ["pytest"],
    },
    zip_safe=True,
    maintainer="dgx-ros2",
    maintainer_email="user@example.com",
    description="Republish motion-capture rigid body poses in ENU and NED with matching TF frames",
    license="Apache-2.0",
    tests_require=["pytest"],
    entry_points={
        "console_scripts": [
            "mocap_pose_relay_node = mocap_pose_relay.ros.relay_node:main",
        ],
    },
)
