"""Allow running as python -m cmsctl"""
from cmsctl import main

if __name__ == '__main__':
    main()
