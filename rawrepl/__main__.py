# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.

from rawrepl._cli import main

if __name__ == "__main__":
    main()
