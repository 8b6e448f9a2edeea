"""Configuration text for an Apache server that answers recorded requests."""

from __future__ import annotations


def apache_main_config(mod_mpm_prefork: str, mod_authz_core: str, mod_deepcgi: str) -> str:
    """Main server configuration, loading the given module files."""
    return (
        f"LoadModule mpm_prefork_module {mod_mpm_prefork}\n"
        f"LoadModule authz_core_module {mod_authz_core}\n"
        "Mutex pthread\n"
        f"LoadFile {mod_deepcgi}\n"
        f"LoadModule deepcgi_module {mod_deepcgi}\n"
        "SetHandler deepcgi-handler\n"
    )


def apache_ssl_config(mod_ssl: str, certificate_file: str, key_file: str) -> str:
    """Extra configuration enabling TLS with the given certificate and key."""
    return (
        f"LoadModule ssl_module {mod_ssl}\n"
        "SSLEngine on\n"
        f"SSLCertificateFile      {certificate_file}\n"
        f"SSLCertificateKeyFile {key_file}\n"
    )