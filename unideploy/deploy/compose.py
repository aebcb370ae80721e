"""Docker / docker compose command builders and status parsing."""

import re
import shlex

_UP_RE = re.compile(r"\bUp\b")


def compose_cmd(compose_file, *args):
    """Build ``docker compose -f <file> <args...>``."""
    parts = ["docker", "compose", "-f", shlex.quote(compose_file), *args]
    return " ".join(parts)


def down_cmd(compose_file):
    return compose_cmd(compose_file, "down", "--remove-orphans")


def up_cmd(compose_file):
    return compose_cmd(compose_file, "up", "-d", "--build")


def ps_cmd(compose_file):
    return compose_cmd(compose_file, "ps")


def logs_cmd(compose_file, service=None, follow=False, tail=None):
    args = ["logs"]
    if follow:
        args.append("-f")
    if tail is not None:
        args.append(f"--tail={tail}")
    if service:
        args.append(shlex.quote(service))
    return compose_cmd(compose_file, *args)


def restart_cmd(compose_file):
    return compose_cmd(compose_file, "restart")


def list_containers_cmd(filter_expr):
    """List all container names (running or not) matching a docker ps filter."""
    return f"docker ps -a --filter {shlex.quote(filter_expr)} --format '{{{{.Names}}}}'"


def remove_containers_cmd(names):
    return "docker rm -f " + " ".join(shlex.quote(n) for n in names)


def conflict_filters(container_filter, ports):
    """docker ps filters for containers that would clash with the new stack."""
    filters = [f"name={container_filter}"]
    filters.extend(f"publish={port}" for port in ports)
    return filters


def parse_container_names(output):
    """Split ``docker ps --format '{{.Names}}'`` output into unique names, in order."""
    names = []
    for line in output.splitlines():
        name = line.strip()
        if name and name not in names:
            names.append(name)
    return names


def services_up(ps_output):
    """True if any service line of ``docker compose ps`` reports ``Up``."""
    lines = ps_output.splitlines()
    # First line is the table header
    return any(_UP_RE.search(line) for line in lines[1:])


def useful_commands(compose_file, redeploy_cmd):
    """Operator hints printed in the deployment summary."""
    return [
        ("View logs", logs_cmd(compose_file, follow=True)),
        ("Stop services", compose_cmd(compose_file, "down")),
        ("Restart services", restart_cmd(compose_file)),
        ("Rebuild and redeploy", redeploy_cmd),
    ]
