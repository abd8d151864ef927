ORACLE_PROVIDER_ID = "oracle"

ORACLE_DOWNLOADS_URL = "https://www.oracle.com/java/technologies/downloads/"
ORACLE_ARCHIVE_URL = (
    "https://www.oracle.com/java/technologies/javase/"
    "jdk{version}-archive-downloads.html"
)
# Major lines with a dedicated archive page.
ORACLE_ARCHIVE_VERSIONS = range(17, 24)

ORACLE_EXTENSIONS = ["deb", "dmg", "exe", "msi", "rpm", "tar.gz", "zip"]
