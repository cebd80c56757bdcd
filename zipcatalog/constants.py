"""
Copyright 2025 DNAi inc.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

"""
ZIP format constants including signatures, version numbers and scan limits.

This module defines all the constants used throughout the zipcatalog library
for locating and parsing ZIP archives.
"""

# ZIP file signatures (magic numbers)
LOCAL_FILE_HEADER = 0x04034B50  # "PK\x03\x04"
CENTRAL_DIR_HEADER = 0x02014B50  # "PK\x01\x02"
DIGITAL_SIGNATURE = 0x05054B50  # "PK\x05\x05"
END_OF_CENTRAL_DIR = 0x06054B50  # "PK\x05\x06"
ZIP64_END_OF_CENTRAL_DIR = 0x06064B50  # "PK\x06\x06"
ZIP64_END_OF_CENTRAL_DIR_LOCATOR = 0x07064B50  # "PK\x06\x07"

# Highest "version needed to extract" we understand (2.0)
VERSION_SUPPORTED = 20

# End of central directory size (fixed part, excluding comment)
END_OF_CENTRAL_DIR_SIZE = 22

# Longest comment an end of central directory record can carry
MAX_COMMENT_SIZE = 0xFFFF

# Backward scan for the end of central directory record. The first window
# after the fast path is EOCD_SCAN_INITIAL bytes from the end and every
# following window is EOCD_SCAN_GROWTH times larger, up to EOCD_SCAN_MAX.
EOCD_SCAN_INITIAL = 64
EOCD_SCAN_GROWTH = 4
EOCD_SCAN_MAX = END_OF_CENTRAL_DIR_SIZE + MAX_COMMENT_SIZE

# Read/copy buffer size
CHUNK_SIZE = 16384
