MICROSOFT_PROVIDER_ID = "microsoft"

MICROSOFT_DOWNLOAD_PAGES = [
    "https://learn.microsoft.com/en-us/java/openjdk/download",
    "https://learn.microsoft.com/en-us/java/openjdk/older-releases",
]

MICROSOFT_EXTENSIONS = ["deb", "msi", "pkg", "rpm", "tar.gz", "zip"]
MICROSOFT_CHECKSUM_SUFFIX = ".sha256sum.txt"
