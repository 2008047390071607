from clice.command import mangle_command

RESOURCE_DIR = "/opt/llvm/lib/clang/20"

COMMAND = (
    "/usr/local/bin/clang++"
    " -Dclice_core_EXPORTS"
    " -I/home/user/clice/deps/llvm/build-install/include"
    " -I/home/user/clice/include"
    " -I/home/user/clice/deps/toml/include"
    " -I/home/user/clice/deps/libuv/include"
    "  -fno-rtti"
    " -fno-exceptions"
    " -g -O0 -fsanitize=address"
    " -Wno-deprecated-declarations"
    " -g -std=gnu++23 -fPIC -Winvalid-pch"
    " -Xclang -include-pch"
    " -Xclang /home/user/clice/build/CMakeFiles/clice-core.dir/cmake_pch.hxx.pch"
    " -Xclang -include -Xclang /home/user/clice/build/CMakeFiles/clice-core.dir/cmake_pch.hxx"
    " -o CMakeFiles/clice-core.dir/src/Basic/URI.cpp.o"
    " -c /home/user/clice/src/Basic/URI.cpp"
)


def test_full_command():
    args = mangle_command(COMMAND, RESOURCE_DIR)
    assert args[0] == "/usr/local/bin/clang++"
    assert args[-1] == f"-resource-dir={RESOURCE_DIR}"
    assert "-c" not in args
    assert "-o" not in args
    assert "CMakeFiles/clice-core.dir/src/Basic/URI.cpp.o" not in args
    assert "/home/user/clice/src/Basic/URI.cpp" in args
    assert "-O0" in args
    assert "-std=gnu++23" in args
    assert args.count("-Xclang") == COMMAND.split().count("-Xclang")
    assert "" not in args


def test_kept_arguments_keep_their_order():
    args = mangle_command(COMMAND, RESOURCE_DIR)
    expected = [a for a in COMMAND.split() if a in args]
    assert [a for a in args if a in expected] == expected


def test_quotes_group_words():
    args = mangle_command("clang++ \"-DNAME=a b\" 'x y' main.cpp", RESOURCE_DIR)
    assert args == ["clang++", "-DNAME=a b", "x y", "main.cpp", f"-resource-dir={RESOURCE_DIR}"]


def test_quote_of_other_kind_is_literal():
    args = mangle_command("clang++ \"-DQ='v'\" '-DR=\"w\"'", RESOURCE_DIR)
    assert args[1:3] == ["-DQ='v'", '-DR="w"']


def test_repeated_spaces_are_ignored():
    args = mangle_command("  clang++    main.cpp  ", RESOURCE_DIR)
    assert args == ["clang++", "main.cpp", f"-resource-dir={RESOURCE_DIR}"]


def test_joined_output_option_removed():
    args = mangle_command("clang++ -ofoo.o -c main.cpp", RESOURCE_DIR)
    assert args == ["clang++", "main.cpp", f"-resource-dir={RESOURCE_DIR}"]


def test_response_file_removed():
    args = mangle_command("clang++ @CMakeFiles/x.rsp main.cpp", RESOURCE_DIR)
    assert args == ["clang++", "main.cpp", f"-resource-dir={RESOURCE_DIR}"]


def test_trailing_output_option_consumes_resource_dir():
    args = mangle_command("clang++ main.cpp -o", RESOURCE_DIR)
    assert args == ["clang++", "main.cpp"]


def test_empty_command():
    assert mangle_command("", RESOURCE_DIR) == [f"-resource-dir={RESOURCE_DIR}"]