import sys

from ari_wx.cli import main

sys.exit(main())
