from setuptools import find_packages, setup

package_name = "boxcox_ep"

setup(
    name=package_name,
    version="0.1.0",
    packages=find_packages(exclude=["test"]),
    data_files=[
        (
            "share/" + package_name + "/config",
            [
                "config/boxcox_ep_base.yaml",
            ],
        ),
    ],
    install_requires=["setuptools", "numpy", "scipy", "pydantic>=2", "pyyaml"],
    extras_require={"test": ["pytest"]},
    zip_safe=True,
    python_requires=">=3.9",
    description="Expectation-propagation message operators for the Box-Cox transform and its Jacobian factor",
    license="Apache-2.0",
)
