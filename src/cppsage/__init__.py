"""Scaffold, install, build and run C++ projects with CMake and Conan."""
