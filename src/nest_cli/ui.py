"""
User-facing text of the CLI.
"""

BANNER = r"""
 _   _             _      ___  _____  _____  _     _____
| \ | |           | |    |_  |/  ___|/  __ \| |   |_   _|
|  \| |  ___  ___ | |_     | |\ `--. | /  \/| |     | |
| . ` | / _ \/ __|| __|    | | `--. \| |    | |     | |
| |\  ||  __/\__ \| |_ /\__/ //\__/ /| \__/\| |_____| |_
\_| \_/ \___||___/ \__|\____/ \____/  \____/\_____/\___/
"""

MESSAGES = {
    "PROJECT_INFORMATION_START": "⚡  We will scaffold your app in a few seconds..",
    "ADDITIONAL_INFORMATION": "💡  Press enter to accept the default value shown in brackets",
    "PROJECT_INFORMATION_COLLECTED": "🚀  Thanks! Generating your project now...",
    "PACKAGE_MANAGER_QUESTION": "Which package manager would you ❤️  to use?",
    "PACKAGE_MANAGER_INSTALLATION_IN_PROGRESS": "Installation in progress... ☕",
    "PACKAGE_MANAGER_INSTALLATION_SUCCEED": "🚀  Successfully created project {name}",
    "PACKAGE_MANAGER_INSTALLATION_FAILED": (
        "🙀  Packages installation failed, see above"
    ),
    "GET_STARTED_INFORMATION": "👉  Get started with the following commands:",
    "DRY_RUN_MODE": "Command has been executed in dry run mode, nothing changed!",
    "NEST_INFORMATION_PACKAGE_MANAGER_FAILED": (
        "😼  cannot read your project package.json file, "
        "are you inside your project directory?"
    ),
    "SCHEMATICS_FAILED": "❌  Failed to execute schematic {schematic}",
    "UNKNOWN_VERSION": "Unknown",
}

WARNING_HEADER = "[Warnings]"
WARNING_EXPLANATION = (
    "The following packages are not in the same minor version",
    "This could lead to runtime errors",
)
