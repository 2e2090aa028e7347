"""
Hetzner Robot Client - API Endpoint Constants

This module contains the Robot webservice endpoint paths used by the
resource services. All paths are relative to the base URL.
"""

# Servers
API_SERVER = "/server"                          # /{server-number}

# Firewall
API_FIREWALL = "/firewall"                      # /{server-number}
API_FIREWALL_TEMPLATE = "/firewall/template"    # /{template-id}

# SSH keys
API_KEY = "/key"                                # /{fingerprint}

# Reset
API_RESET = "/reset"                            # /{server-number}

# Boot configuration
API_BOOT = "/boot"                              # /{server-number}
API_BOOT_RESCUE = "/boot/{server_id}/rescue"
API_BOOT_RESCUE_LAST = "/boot/{server_id}/rescue/last"
API_BOOT_LINUX = "/boot/{server_id}/linux"
API_BOOT_VNC = "/boot/{server_id}/vnc"

# IP addresses
API_IP = "/ip"                                  # /{ip}
API_IP_CANCELLATION = "/ip/{ip}/cancellation"

# Failover IPs
API_FAILOVER = "/failover"                      # /{failover-ip}

# Traffic statistics
API_TRAFFIC = "/traffic"

# Wake on LAN
API_WOL = "/wol"                                # /{server-number}

# Reverse DNS
API_RDNS = "/rdns"                              # /{ip}

# vSwitch
API_VSWITCH = "/vswitch"                        # /{vswitch-id}
API_VSWITCH_SERVER = "/vswitch/{vswitch_id}/server"

# Provider status values
STATUS_IN_PROCESS = "in process"
STATUS_READY = "ready"
