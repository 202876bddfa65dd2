# tools/probe_once.py
# Usage: python3 -m tools.probe_once example.com 443
import sys
import json
from connloop.prober.tcp import TcpProber
from connloop.resolver import resolve

def main():
    if len(sys.argv) < 2:
        print("Usage: python3 -m tools.probe_once <target_ip_or_host> [port] [timeout_s]")
        return
    target = sys.argv[1]
    port = sys.argv[2] if len(sys.argv) > 2 else "80"
    timeout = float(sys.argv[3]) if len(sys.argv) > 3 else 1.0
    ep = resolve(target, port)[0]
    ev = TcpProber().connect_once(ep, timeout)
    sock = ev.pop("sock")
    if sock is not None:
        sock.close()
    ev["endpoint"] = ep.describe()
    print(json.dumps(ev, indent=2))

if __name__ == "__main__":
    main()
