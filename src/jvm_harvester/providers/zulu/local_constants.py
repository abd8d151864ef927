ZULU_PROVIDER_ID = "zulu"

ZULU_API_URL = "https://api.azul.com/metadata/v1/zulu/packages/"
ZULU_PAGE_SIZE = 1000
ZULU_INCLUDE_FIELDS = (
    "java_package_features,release_status,os,arch,hw_bitness,abi,"
    "java_package_type,javafx_bundled,sha256_hash,size,archive_type,"
    "lib_c_type,crac_supported"
)
# Safety stop for the page loop; the catalog holds a few thousand packages.
ZULU_MAX_PAGES = 50
