"""Remote bootstrap command list for a freshly provisioned droplet."""

import shlex

SERVER_ARCHIVE = "linux.zip"


def default_bootstrap_commands(config) -> list[str]:
    """Build the ordered command list run from the remote home directory.

    Order matters: firewall, unpack the docker context, fetch the server
    binaries, build the image, run it, then show status and logs.
    """
    commands = []
    for port in config.ports:
        commands.append(f"ufw allow {port}/tcp")
        commands.append(f"ufw allow {port}/udp")

    commands.append("apt-get install -y unzip")
    commands.append(f"unzip -o {shlex.quote(config.archive_filename)}")

    if config.download_url:
        commands.append(f"curl -fsSL {shlex.quote(config.download_url)} -o {SERVER_ARCHIVE}")
        commands.append(f"unzip -o {SERVER_ARCHIVE}")

    service = config.service
    commands += [
        f"docker build -t {service} .",
        f"docker run -d --name {service} --net=host {service}",
        "docker ps -a",
        f"docker logs {service}",
    ]
    return commands


def bootstrap_commands(config) -> list[str]:
    """Configured command list if the config provides one, else the default bootstrap."""
    if config.commands is not None:
        return list(config.commands)
    return default_bootstrap_commands(config)
