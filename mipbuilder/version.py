# --------------------------------------------------------------------------
# Source file provided under Apache License, Version 2.0, January 2004,
# http://www.apache.org/licenses/
# (c) Copyright IBM Corp. 2015, 2016
# --------------------------------------------------------------------------

# gendoc: ignore

mipbuilder_version_major = 1
mipbuilder_version_minor = 0
mipbuilder_version_micro = 0

mipbuilder_version_string = '{0}.{1}.{2}'.format(mipbuilder_version_major,
                                                 mipbuilder_version_minor,
                                                 mipbuilder_version_micro)
